"""Tests for the HTTP API."""

from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from shopsmart.core.principal import Role

API = "/api/v1"


class TestRootAndHealth:
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_health_without_connection(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "disconnected"


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get(f"{API}/orders/mine")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get(f"{API}/orders/mine", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_routes_reject_buyers(self, client, auth_headers):
        response = await client.get(f"{API}/admin/orders", headers=auth_headers("buyer-1"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_shop_routes_reject_buyers(self, client, auth_headers):
        response = await client.get(f"{API}/shop/orders", headers=auth_headers("buyer-1"))
        assert response.status_code == 403


class TestBuyerOrders:
    @pytest.mark.asyncio
    async def test_place_order_from_items(self, client, auth_headers, make_product, address):
        a = await make_product("Lamp", 100.0)
        b = await make_product("Bulb", 50.0)
        response = await client.post(
            f"{API}/orders",
            json={
                "items": [{"product_id": a, "quantity": 2}, {"product_id": b, "quantity": 1}],
                "shipping_address": address,
            },
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["total_price"] == 250
        assert data["order_status"] == "Processing"
        assert data["payment_status"] == "Pending"
        assert data["user_id"] == "buyer-1"
        assert data["items"][0]["product"] == {"_id": a, "title": "Lamp", "price": 100.0}
        assert ObjectId.is_valid(data["_id"])

    @pytest.mark.asyncio
    async def test_place_order_from_cart(self, client, auth_headers, make_product, address):
        headers = auth_headers("buyer-1")
        a = await make_product("Lamp", 30.0)
        response = await client.post(f"{API}/cart/items", json={"product_id": a, "quantity": 2}, headers=headers)
        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 2

        response = await client.post(f"{API}/orders", json={"shipping_address": address}, headers=headers)
        assert response.status_code == 201
        assert response.json()["total_price"] == 60

        cart = (await client.get(f"{API}/cart", headers=headers)).json()
        assert cart["items"] == []

    @pytest.mark.asyncio
    async def test_empty_cart_error_shape(self, client, auth_headers, address):
        response = await client.post(f"{API}/orders", json={"shipping_address": address},
                                     headers=auth_headers("buyer-1"))
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "BadRequest"
        assert body["message"] == "cart is empty"

    @pytest.mark.asyncio
    async def test_invalid_product_id_format(self, client, auth_headers, address):
        response = await client.post(
            f"{API}/orders",
            json={"items": [{"product_id": "bogus", "quantity": 1}], "shipping_address": address},
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "BadRequest"
        assert body["details"]

    @pytest.mark.asyncio
    async def test_my_orders_and_detail(self, client, auth_headers, make_order):
        mine = await make_order(user_id="buyer-1")
        await make_order(user_id="buyer-2")

        response = await client.get(f"{API}/orders/mine", headers=auth_headers("buyer-1"))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["orders"][0]["_id"] == mine
        assert data["has_more"] is False

        response = await client.get(f"{API}/orders/{mine}", headers=auth_headers("buyer-2"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_cancel_twice(self, client, auth_headers, make_order):
        order_id = await make_order(user_id="buyer-1")
        headers = auth_headers("buyer-1")
        response = await client.post(f"{API}/orders/{order_id}/cancel", headers=headers)
        assert response.status_code == 200
        assert response.json()["order_status"] == "Cancelled"

        response = await client.post(f"{API}/orders/{order_id}/cancel", headers=headers)
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidState"

    @pytest.mark.asyncio
    async def test_cancel_by_non_owner(self, client, auth_headers, make_order):
        order_id = await make_order(user_id="buyer-1")
        response = await client.post(f"{API}/orders/{order_id}/cancel", headers=auth_headers("buyer-2"))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_unknown_order(self, client, auth_headers):
        response = await client.get(f"{API}/orders/{ObjectId()}", headers=auth_headers("buyer-1"))
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"


class TestAdminOrders:
    @pytest.mark.asyncio
    async def test_list_and_filter(self, client, auth_headers, make_order):
        await make_order(order_status="Processing")
        delivered = await make_order(order_status="Delivered")
        headers = auth_headers("admin-1", Role.ADMIN)

        response = await client.get(f"{API}/admin/orders", headers=headers)
        assert response.json()["total"] == 2

        response = await client.get(f"{API}/admin/orders", params={"order_status": "Delivered"}, headers=headers)
        data = response.json()
        assert data["total"] == 1
        assert data["orders"][0]["_id"] == delivered

    @pytest.mark.asyncio
    async def test_status_overwrite(self, client, auth_headers, make_order):
        order_id = await make_order(order_status="Delivered")
        response = await client.put(
            f"{API}/admin/orders/{order_id}/status",
            json={"status": "Processing", "payment_status": "Refunded"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )
        assert response.status_code == 200
        assert response.json()["order_status"] == "Processing"
        assert response.json()["payment_status"] == "Refunded"

    @pytest.mark.asyncio
    async def test_status_overwrite_unknown_order(self, client, auth_headers):
        response = await client.put(
            f"{API}/admin/orders/{ObjectId()}/status",
            json={"status": "Paid"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_dispute_flow(self, client, auth_headers, make_order):
        order_id = await make_order()
        headers = auth_headers("admin-1", Role.ADMIN)
        url = f"{API}/admin/orders/{order_id}/dispute"

        response = await client.post(url, json={"action": "raise", "reason": "Damaged", "description": "Dented"},
                                     headers=headers)
        assert response.status_code == 200
        assert response.json()["dispute"]["status"] == "raised"

        response = await client.post(url, json={"action": "resolve", "resolution": "Replaced"}, headers=headers)
        dispute = response.json()["dispute"]
        assert dispute["status"] == "resolved"
        assert dispute["reason"] == "Damaged"

    @pytest.mark.asyncio
    async def test_unknown_dispute_action(self, client, auth_headers, make_order):
        order_id = await make_order()
        response = await client.post(
            f"{API}/admin/orders/{order_id}/dispute",
            json={"action": "escalate"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "BadRequest"

    @pytest.mark.asyncio
    async def test_refund_above_total_then_approve(self, client, auth_headers, make_order):
        order_id = await make_order(lines=[(str(ObjectId()), 1, 40.0)])
        headers = auth_headers("admin-1", Role.ADMIN)
        url = f"{API}/admin/orders/{order_id}/refund"

        response = await client.post(url, json={"action": "request", "amount": 41}, headers=headers)
        assert response.status_code == 400

        response = await client.post(url, json={"action": "approve"}, headers=headers)
        assert response.status_code == 409
        assert "requested" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_refund_flow(self, client, auth_headers, make_order):
        order_id = await make_order(lines=[(str(ObjectId()), 1, 40.0)])
        headers = auth_headers("admin-1", Role.ADMIN)
        url = f"{API}/admin/orders/{order_id}/refund"

        await client.post(url, json={"action": "request", "amount": 40, "reason": "Late"}, headers=headers)
        await client.post(url, json={"action": "approve"}, headers=headers)
        response = await client.post(url, json={"action": "process", "transaction_id": "rfnd_1"}, headers=headers)
        refund = response.json()["refund"]
        assert refund["status"] == "processed"
        assert refund["transaction_id"] == "rfnd_1"
        assert refund["amount"] == 40


class TestShopOrders:
    @pytest.mark.asyncio
    async def test_scoped_listing_and_totals(self, client, auth_headers, make_product, make_order):
        mine = await make_product("Mine", 100.0, shop_id="shop-1")
        theirs = await make_product("Theirs", 50.0, shop_id="shop-2")
        mixed = await make_order(lines=[(mine, 2, 100.0), (theirs, 1, 50.0)])
        await make_order(lines=[(theirs, 4, 50.0)])

        response = await client.get(f"{API}/shop/orders", headers=auth_headers("shop-1", Role.SHOP))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        order = data["orders"][0]
        assert order["_id"] == mixed
        assert [item["product_id"] for item in order["items"]] == [mine]
        assert order["shop_total_price"] == 200
        assert order["shop_item_count"] == 2
        assert order["total_price"] == 250

    @pytest.mark.asyncio
    async def test_order_outside_shop_is_not_found(self, client, auth_headers, make_product, make_order):
        await make_product("Mine", 10.0, shop_id="shop-1")
        theirs = await make_product("Theirs", 10.0, shop_id="shop-2")
        order_id = await make_order(lines=[(theirs, 1, 10.0)])
        response = await client.get(f"{API}/shop/orders/{order_id}", headers=auth_headers("shop-1", Role.SHOP))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_advance_status(self, client, auth_headers, make_product, make_order):
        mine = await make_product("Mine", 10.0, shop_id="shop-1")
        order_id = await make_order(lines=[(mine, 1, 10.0)], order_status="Shipped")
        headers = auth_headers("shop-1", Role.SHOP)
        url = f"{API}/shop/orders/{order_id}/status"

        response = await client.put(url, json={"status": "Processing"}, headers=headers)
        assert response.status_code == 409
        assert "Shipped -> Delivered" in response.json()["message"]

        response = await client.put(url, json={"status": "Delivered"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["order_status"] == "Delivered"

    @pytest.mark.asyncio
    async def test_advance_foreign_order_forbidden(self, client, auth_headers, make_product, make_order):
        theirs = await make_product("Theirs", 10.0, shop_id="shop-2")
        order_id = await make_order(lines=[(theirs, 1, 10.0)])
        response = await client.put(
            f"{API}/shop/orders/{order_id}/status",
            json={"status": "Shipped"},
            headers=auth_headers("shop-1", Role.SHOP),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_sales_report(self, client, auth_headers, make_product, make_order):
        mine = await make_product("Mine", 20.0, shop_id="shop-1")
        other = await make_product("Other", 5.0, shop_id="shop-2")
        start = datetime(2024, 3, 1)
        for day in range(11):
            await make_order(lines=[(mine, 1, 20.0), (other, 2, 5.0)], created_at=start + timedelta(days=day))
        await make_order(lines=[(other, 1, 5.0)])

        response = await client.get(f"{API}/shop/sales", headers=auth_headers("shop-1", Role.SHOP))
        assert response.status_code == 200
        report = response.json()
        assert report["total_orders"] == 11
        assert report["total_items_sold"] == 11
        assert report["total_sales"] == 220
        assert len(report["recent_orders"]) == 10
        assert report["recent_orders"][0]["created_at"].startswith("2024-03-11")
        assert sum(o["shop_total_price"] for o in report["recent_orders"]) == 200


class TestPaymentsApi:
    @pytest.mark.asyncio
    async def test_verify(self, client, auth_headers, make_order):
        from shopsmart.config.settings import get_settings
        from shopsmart.services.payments import compute_signature

        order_id = await make_order(user_id="buyer-1")
        signature = compute_signature("gw_1", "pay_1", get_settings().payment_key_secret)
        response = await client.post(
            f"{API}/payments/verify",
            json={"order_id": order_id, "gateway_order_id": "gw_1", "payment_id": "pay_1", "signature": signature},
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["order_status"] == "Paid"
        assert body["data"]["payment_status"] == "Completed"

    @pytest.mark.asyncio
    async def test_verify_bad_signature(self, client, auth_headers, make_order):
        order_id = await make_order(user_id="buyer-1")
        response = await client.post(
            f"{API}/payments/verify",
            json={"order_id": order_id, "gateway_order_id": "gw_1", "payment_id": "pay_1", "signature": "abc"},
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "payment verification failed"

    @pytest.mark.asyncio
    async def test_verify_non_ascii_signature(self, client, auth_headers, make_order):
        order_id = await make_order(user_id="buyer-1")
        response = await client.post(
            f"{API}/payments/verify",
            json={"order_id": order_id, "gateway_order_id": "gw_1", "payment_id": "pay_1", "signature": "é" * 64},
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "payment verification failed"


class TestAdminCommandBodies:
    @pytest.mark.asyncio
    async def test_padded_dispute_and_refund_bodies(self, client, auth_headers, make_order):
        order_id = await make_order(lines=[(str(ObjectId()), 1, 30.0)])
        headers = auth_headers("admin-1", Role.ADMIN)

        response = await client.post(
            f"{API}/admin/orders/{order_id}/dispute",
            json={"action": "raise", "reason": "  Damaged ", "description": " Dented "},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["dispute"]["reason"] == "Damaged"

        response = await client.post(
            f"{API}/admin/orders/{order_id}/refund",
            json={"action": "request", "amount": 30, "reason": "  "},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["refund"]["reason"] == "No reason provided"

        response = await client.post(
            f"{API}/admin/orders/{order_id}/refund",
            json={"action": "request", "amount": 10},
            headers=headers,
        )
        assert response.status_code == 409


class TestOrderLimits:
    @pytest.mark.asyncio
    async def test_quantity_above_limit(self, client, auth_headers, make_product, address):
        from shopsmart.config.settings import get_settings

        a = await make_product("Lamp", 1.0)
        response = await client.post(
            f"{API}/orders",
            json={
                "items": [{"product_id": a, "quantity": get_settings().max_item_quantity + 1}],
                "shipping_address": address,
            },
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_too_many_items(self, client, auth_headers, make_product, address):
        from shopsmart.config.settings import get_settings

        a = await make_product("Lamp", 1.0)
        items = [{"product_id": a, "quantity": 1}] * (get_settings().max_order_items + 1)
        response = await client.post(
            f"{API}/orders", json={"items": items, "shipping_address": address}, headers=auth_headers("buyer-1")
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_cart_add_above_limit(self, client, auth_headers, make_product):
        from shopsmart.config.settings import get_settings

        a = await make_product("Lamp", 1.0)
        response = await client.post(
            f"{API}/cart/items",
            json={"product_id": a, "quantity": get_settings().max_item_quantity + 1},
            headers=auth_headers("buyer-1"),
        )
        assert response.status_code == 400
