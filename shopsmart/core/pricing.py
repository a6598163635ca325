"""
Order pricing and placement checks.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.order import OrderItemDocument, ShippingAddress
from ..models.product import ProductDocument
from .errors import BadRequestError

REQUIRED_ADDRESS_FIELDS = ("street", "city", "postal_code", "country")


def ensure_complete_address(address: ShippingAddress) -> ShippingAddress:
    """Raise BadRequestError unless every shipping field is non-empty."""
    missing = [
        name for name in REQUIRED_ADDRESS_FIELDS
        if not (getattr(address, name) or "").strip()
    ]
    if missing:
        raise BadRequestError(
            "shipping address is incomplete",
            detail=f"missing: {', '.join(missing)}",
        )
    return address


def order_total(items: Iterable[OrderItemDocument]) -> float:
    """Sum of recorded line-item subtotals, rounded to cents."""
    return round(sum(item.subtotal for item in items), 2)


def price_items(
    requested: Iterable[Tuple[str, int]],
    products: Dict[str, ProductDocument],
    max_items: Optional[int] = None,
    max_quantity: Optional[int] = None,
) -> Tuple[List[OrderItemDocument], float]:
    """
    Build order items from (product_id, quantity) pairs using current prices.

    Args:
        requested: Product IDs and quantities, in order
        products: Product documents keyed by string ID
        max_items: Largest number of lines allowed, if limited
        max_quantity: Largest quantity allowed per line, if limited

    Returns:
        Tuple of (order items, total price)

    Raises:
        BadRequestError: If the list is empty or too long, a product is
            unknown, or a quantity is not positive or above the limit
    """
    requested = list(requested)
    if not requested:
        raise BadRequestError("order must contain at least one item")
    if max_items is not None and len(requested) > max_items:
        raise BadRequestError(
            f"order cannot contain more than {max_items} items",
            detail=f"items: {len(requested)}",
        )

    if any(product_id not in products for product_id, _ in requested):
        raise BadRequestError("one or more products are invalid")

    items = []
    for product_id, quantity in requested:
        if quantity is None or quantity <= 0:
            raise BadRequestError(
                "quantity must be greater than zero",
                detail=f"product {product_id}: {quantity}",
            )
        if max_quantity is not None and quantity > max_quantity:
            raise BadRequestError(
                f"quantity cannot exceed {max_quantity}",
                detail=f"product {product_id}: {quantity}",
            )
        product = products[product_id]
        items.append(OrderItemDocument(
            product_id=product_id,
            quantity=quantity,
            product_name=product.title,
            price_per_item=round(product.price, 2),
        ))

    return items, order_total(items)
