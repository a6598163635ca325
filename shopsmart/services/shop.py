"""
Seller views of orders: scoped listings, fulfilment steps and sales report.
"""
import logging
from typing import Dict, List, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config.settings import get_settings
from ..core import lifecycle
from ..core.errors import NotFoundError
from ..core.principal import Principal
from ..core.scoping import SalesReport, ShopScopedOrder, build_sales_report, scope_order, scope_orders
from ..models.order import OrderDocument, OrderStatus
from ..models.product import ProductDocument
from .orders import get_order_document, save_order
from .products import owned_products

logger = logging.getLogger(__name__)
settings = get_settings()


def _prices(products: Dict[str, ProductDocument]) -> Dict[str, float]:
    return {pid: product.price for pid, product in products.items()}


async def list_shop_orders(
    db: AsyncIOMotorDatabase,
    principal: Principal,
) -> Tuple[List[ShopScopedOrder], Dict[str, ProductDocument]]:
    """
    Every order containing at least one of the seller's products, newest first

    Returns:
        Tuple of (scoped orders, the seller's products keyed by ID)
    """
    products = await owned_products(db, principal.id)
    if not products:
        return [], products

    cursor = db.orders.find({"items.product_id": {"$in": list(products)}}).sort("created_at", -1)
    docs = await cursor.to_list(length=None)
    orders = [OrderDocument.model_validate(doc) for doc in docs]
    return scope_orders(orders, _prices(products)), products


async def get_shop_order(
    db: AsyncIOMotorDatabase,
    principal: Principal,
    order_id: str,
) -> Tuple[ShopScopedOrder, Dict[str, ProductDocument]]:
    order = await get_order_document(db, order_id)
    products = await owned_products(db, principal.id)
    view = scope_order(order, _prices(products))
    if view is None:
        raise NotFoundError(f"Order {order_id} not found")
    return view, products


async def advance_order_status(
    db: AsyncIOMotorDatabase,
    principal: Principal,
    order_id: str,
    requested: OrderStatus,
) -> Tuple[ShopScopedOrder, Dict[str, ProductDocument]]:
    """Move an order one step along the seller path and return the seller's view of it."""
    order = await get_order_document(db, order_id)
    products = await owned_products(db, principal.id)
    updated = await save_order(db, lifecycle.advance_shop_status(order, principal, requested, products))
    return scope_order(updated, _prices(products)), products


async def sales_report(
    db: AsyncIOMotorDatabase,
    principal: Principal,
) -> Tuple[SalesReport, Dict[str, ProductDocument]]:
    scoped, products = await list_shop_orders(db, principal)
    report = build_sales_report(scoped, settings.sales_report_recent_limit)
    logger.info(
        f"Sales report for shop {principal.id}: {report.total_orders} orders, {report.total_sales} total"
    )
    return report, products
