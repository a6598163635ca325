"""
Document to response conversion
"""
from typing import Dict, Optional

from ..core.scoping import SalesReport, ShopScopedOrder
from ..models.cart import CartDocument
from ..models.order import OrderDocument
from ..models.product import ProductDocument
from ..schemas.cart import CartItemResponse, CartResponse
from ..schemas.order import (
    OrderItemResponse,
    OrderResponse,
    ProductSummaryResponse,
    SalesReportResponse,
    ShopOrderResponse,
)


def product_summary(product: Optional[ProductDocument]) -> Optional[ProductSummaryResponse]:
    if product is None:
        return None
    return ProductSummaryResponse(id=product.id, title=product.title, price=product.price)


def _order_fields(order: OrderDocument, products: Dict[str, ProductDocument]) -> dict:
    """
    Response fields of an order with each item's current product populated

    Args:
        order: Order document
        products: Product documents keyed by string ID

    Returns:
        Keyword arguments for OrderResponse and its subclasses
    """
    fields = order.model_dump(exclude={"items"})
    fields["items"] = [
        OrderItemResponse(
            product_id=item.product_id,
            product=product_summary(products.get(item.product_id)),
            product_name=item.product_name,
            quantity=item.quantity,
            price_per_item=item.price_per_item,
        )
        for item in order.items
    ]
    return fields


def order_response(order: OrderDocument, products: Dict[str, ProductDocument]) -> OrderResponse:
    return OrderResponse(**_order_fields(order, products))


def shop_order_response(view: ShopScopedOrder, products: Dict[str, ProductDocument]) -> ShopOrderResponse:
    return ShopOrderResponse(
        **_order_fields(view.order, products),
        shop_total_price=view.shop_total_price,
        shop_item_count=view.shop_item_count,
    )


def sales_report_response(report: SalesReport, products: Dict[str, ProductDocument]) -> SalesReportResponse:
    return SalesReportResponse(
        total_sales=report.total_sales,
        total_orders=report.total_orders,
        total_items_sold=report.total_items_sold,
        recent_orders=[shop_order_response(view, products) for view in report.recent_orders],
    )


def cart_response(cart: CartDocument, products: Dict[str, ProductDocument]) -> CartResponse:
    return CartResponse(
        id=cart.id,
        user_id=cart.user_id,
        items=[
            CartItemResponse(
                product_id=item.product_id,
                product=product_summary(products.get(item.product_id)),
                quantity=item.quantity,
            )
            for item in cart.items
        ],
        updated_at=cart.updated_at,
    )
