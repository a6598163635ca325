"""
Order placement and order reads/updates.

Every update is a single read-modify-write: load the order, apply a pure
transition from ``shopsmart.core.lifecycle``, write the result back.
Concurrent updates to one order are last-write-wins.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config.settings import get_settings
from ..core import lifecycle
from ..core.errors import BadRequestError, ForbiddenError, NotFoundError
from ..core.pricing import ensure_complete_address, price_items
from ..core.principal import Principal
from ..models.order import (
    OrderDocument,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ShippingAddress,
)
from ..models.product import ProductDocument
from ..schemas.order import AdminStatusUpdateRequest, PlaceOrderRequest
from ..utils.dependencies import validate_object_id
from . import cart as cart_service
from .products import load_products

logger = logging.getLogger(__name__)
settings = get_settings()


# Store access

async def get_order_document(db: AsyncIOMotorDatabase, order_id: str) -> OrderDocument:
    """
    Load an order or fail

    Raises:
        BadRequestError: If the ID is malformed
        NotFoundError: If no such order exists
    """
    object_id = validate_object_id(order_id, "order")
    doc = await db.orders.find_one({"_id": object_id})
    if not doc:
        raise NotFoundError(f"Order {order_id} not found")
    return OrderDocument.model_validate(doc)


async def save_order(db: AsyncIOMotorDatabase, order: OrderDocument) -> OrderDocument:
    await db.orders.update_one(
        {"_id": validate_object_id(order.id, "order")},
        {"$set": order.to_mongo()},
    )
    return order


async def products_for(db: AsyncIOMotorDatabase, orders: List[OrderDocument]) -> Dict[str, ProductDocument]:
    """Current products referenced by any of ``orders``."""
    return await load_products(db, {pid for order in orders for pid in order.product_ids()})


# Placement

def _price(requested, products: Dict[str, ProductDocument]):
    return price_items(
        requested,
        products,
        max_items=settings.max_order_items,
        max_quantity=settings.max_item_quantity,
    )


async def place_order(db: AsyncIOMotorDatabase, principal: Principal, request: PlaceOrderRequest) -> OrderDocument:
    """
    Create an order from explicit items or from the buyer's cart.

    The cart path claims the cart atomically before inserting the order and
    restores it if anything after the claim fails.
    """
    address = ensure_complete_address(ShippingAddress(**request.shipping_address.model_dump()))

    if request.items is not None:
        requested = [(item.product_id, item.quantity) for item in request.items]
        products = await load_products(db, [pid for pid, _ in requested])
        items, total_price = _price(requested, products)
        return await _insert_order(db, principal, items, total_price, address, request.payment_method)

    claimed = await cart_service.claim_cart_items(db, principal.id)
    if not claimed:
        raise BadRequestError("cart is empty")

    try:
        requested = [(item.product_id, item.quantity) for item in claimed]
        products = await load_products(db, [pid for pid, _ in requested])
        items, total_price = _price(requested, products)
        return await _insert_order(db, principal, items, total_price, address, request.payment_method)
    except Exception:
        await cart_service.restore_cart_items(db, principal.id, claimed)
        raise


async def _insert_order(
    db: AsyncIOMotorDatabase,
    principal: Principal,
    items,
    total_price: float,
    address: ShippingAddress,
    payment_method: PaymentMethod,
) -> OrderDocument:
    now = datetime.utcnow()
    order = OrderDocument(
        user_id=principal.id,
        items=items,
        total_price=total_price,
        shipping_address=address,
        payment_method=payment_method,
        payment_status=PaymentStatus.PENDING,
        order_status=OrderStatus.PROCESSING,
        created_at=now,
        updated_at=now,
    )
    result = await db.orders.insert_one(order.to_mongo())
    logger.info(f"Order created: {result.inserted_id} for user {principal.id} total {total_price}")
    return order.model_copy(update={"id": str(result.inserted_id)})


# Buyer

async def list_orders(
    db: AsyncIOMotorDatabase,
    filter_query: dict,
    limit: int,
    offset: int,
) -> Tuple[List[OrderDocument], int]:
    """Newest-first page of orders matching ``filter_query`` plus the total count."""
    total = await db.orders.count_documents(filter_query)
    cursor = db.orders.find(filter_query).sort("created_at", -1).skip(offset).limit(limit)
    docs = await cursor.to_list(length=limit)
    return [OrderDocument.model_validate(doc) for doc in docs], total


async def list_my_orders(db: AsyncIOMotorDatabase, principal: Principal, limit: int, offset: int):
    return await list_orders(db, {"user_id": principal.id}, limit, offset)


async def get_order_for(db: AsyncIOMotorDatabase, principal: Principal, order_id: str) -> OrderDocument:
    """An order visible to its buyer or an admin."""
    order = await get_order_document(db, order_id)
    if order.user_id != principal.id and not principal.is_admin:
        raise ForbiddenError("Not authorized to view this order")
    return order


async def cancel_order(db: AsyncIOMotorDatabase, principal: Principal, order_id: str) -> OrderDocument:
    order = await get_order_document(db, order_id)
    return await save_order(db, lifecycle.cancel_order(order, principal))


# Admin

async def list_all_orders(
    db: AsyncIOMotorDatabase,
    order_status: Optional[OrderStatus],
    limit: int,
    offset: int,
):
    filter_query = {}
    if order_status is not None:
        filter_query["order_status"] = OrderStatus(order_status).value
    return await list_orders(db, filter_query, limit, offset)


async def admin_update_status(
    db: AsyncIOMotorDatabase,
    principal: Principal,
    order_id: str,
    request: AdminStatusUpdateRequest,
) -> OrderDocument:
    order = await get_order_document(db, order_id)
    updated = lifecycle.admin_update_status(order, principal, request.status, request.payment_status)
    return await save_order(db, updated)


async def apply_dispute_action(db: AsyncIOMotorDatabase, principal: Principal, order_id: str,
                               command) -> OrderDocument:
    order = await get_order_document(db, order_id)
    return await save_order(db, lifecycle.apply_dispute(order, principal, command))


async def apply_refund_action(db: AsyncIOMotorDatabase, principal: Principal, order_id: str,
                              command) -> OrderDocument:
    order = await get_order_document(db, order_id)
    return await save_order(db, lifecycle.apply_refund(order, principal, command))
