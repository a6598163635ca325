"""
Shop scoping and seller sales aggregation.

A seller only ever sees the line items of an order that belong to products it
owns. Seller figures are priced at the product's *current* price, unlike the
order's own ``total_price`` which keeps the price recorded at creation.
"""
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ..models.order import OrderDocument


class ShopScopedOrder(BaseModel):
    """An order reduced to one seller's items, with seller totals."""
    order: OrderDocument
    shop_total_price: float = Field(..., ge=0)
    shop_item_count: int = Field(..., gt=0)


class SalesReport(BaseModel):
    total_sales: float = 0
    total_orders: int = 0
    total_items_sold: int = 0
    recent_orders: List[ShopScopedOrder] = Field(default_factory=list)


def scope_order(order: OrderDocument, owned_prices: Dict[str, float]) -> Optional[ShopScopedOrder]:
    """
    Restrict ``order`` to items whose product is in ``owned_prices``.

    Args:
        order: Full order
        owned_prices: Current price of each product the seller owns, keyed by ID

    Returns:
        The scoped order, or None when no item belongs to the seller
    """
    retained = [item for item in order.items if item.product_id in owned_prices]
    if not retained:
        return None

    return ShopScopedOrder(
        order=order.model_copy(update={"items": retained}),
        shop_total_price=round(
            sum(owned_prices[item.product_id] * item.quantity for item in retained), 2
        ),
        shop_item_count=sum(item.quantity for item in retained),
    )


def scope_orders(orders: Iterable[OrderDocument], owned_prices: Dict[str, float]) -> List[ShopScopedOrder]:
    """Scope every order, dropping the ones with nothing from this seller."""
    scoped = []
    for order in orders:
        view = scope_order(order, owned_prices)
        if view is not None:
            scoped.append(view)
    return scoped


def _created_at(view: ShopScopedOrder):
    # Orders missing a timestamp sort last
    return view.order.created_at.timestamp() if view.order.created_at else float("-inf")


def build_sales_report(scoped: List[ShopScopedOrder], recent_limit: int = 10) -> SalesReport:
    """Aggregate a seller's scoped orders."""
    newest_first = sorted(scoped, key=_created_at, reverse=True)
    return SalesReport(
        total_sales=round(sum(view.shop_total_price for view in scoped), 2),
        total_orders=len(scoped),
        total_items_sold=sum(view.shop_item_count for view in scoped),
        recent_orders=newest_first[:recent_limit],
    )
