"""Pytest fixtures for shopsmart tests."""

from datetime import datetime

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from shopsmart.config.database import get_database
from shopsmart.core.principal import Principal, Role
from shopsmart.models.order import OrderDocument, OrderItemDocument, ShippingAddress
from shopsmart.utils.auth import create_access_token

ADDRESS = {"street": "1 Market St", "city": "Pune", "postal_code": "411001", "country": "IN"}


@pytest.fixture
def db():
    """A fresh in-memory database per test."""
    return AsyncMongoMockClient()["shopsmart_test"]


@pytest.fixture
def buyer():
    return Principal(id="buyer-1", role=Role.BUYER)


@pytest.fixture
def other_buyer():
    return Principal(id="buyer-2", role=Role.BUYER)


@pytest.fixture
def shop():
    return Principal(id="shop-1", role=Role.SHOP)


@pytest.fixture
def admin():
    return Principal(id="admin-1", role=Role.ADMIN)


@pytest.fixture
def make_product(db):
    """Insert a product and return its string ID."""
    async def _make(title="Widget", price=100.0, shop_id=None, stock=10):
        result = await db.products.insert_one({
            "title": title,
            "price": price,
            "stock": stock,
            "shop_id": shop_id,
            "created_at": datetime.utcnow(),
        })
        return str(result.inserted_id)
    return _make


@pytest.fixture
def make_order(db):
    """Insert an order from (product_id, quantity, unit price) triples and return its string ID."""
    async def _make(user_id="buyer-1", lines=None, order_status="Processing",
                    created_at=None, **fields):
        lines = lines or [(str(ObjectId()), 1, 10.0)]
        order = build_order(user_id=user_id, lines=lines, order_status=order_status,
                            created_at=created_at or datetime.utcnow(), **fields)
        result = await db.orders.insert_one(order.to_mongo())
        return str(result.inserted_id)
    return _make


def build_order(user_id="buyer-1", lines=None, order_id=None, **fields):
    """An OrderDocument with recorded prices, not persisted."""
    lines = lines or [(str(ObjectId()), 1, 10.0)]
    items = [
        OrderItemDocument(product_id=pid, quantity=qty, product_name=f"Product {pid[-4:]}", price_per_item=price)
        for pid, qty, price in lines
    ]
    return OrderDocument(
        _id=order_id or str(ObjectId()),
        user_id=user_id,
        items=items,
        total_price=round(sum(qty * price for _, qty, price in lines), 2),
        shipping_address=ShippingAddress(**ADDRESS),
        **fields,
    )


@pytest.fixture
def new_order():
    return build_order


@pytest.fixture
def address():
    return dict(ADDRESS)


@pytest.fixture
def auth_headers():
    def _headers(user_id, role=Role.BUYER):
        return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}
    return _headers


@pytest_asyncio.fixture
async def client(db):
    """HTTP client against the app with the in-memory database injected."""
    from shopsmart.main import app

    async def _database():
        return db

    app.dependency_overrides[get_database] = _database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
