"""
Models package for database document structures.
These models represent how data is stored in MongoDB.
"""
from .product import ProductDocument, ProductReview
from .cart import CartDocument, CartItemDocument
from .order import (
    OrderDocument,
    OrderItemDocument,
    ShippingAddress,
    DisputeRecord,
    RefundRecord,
    PaymentDetails,
    OrderStatus,
    PaymentStatus,
    PaymentMethod,
    DisputeStatus,
    RefundStatus,
)

__all__ = [
    # Product models
    "ProductDocument",
    "ProductReview",

    # Cart models
    "CartDocument",
    "CartItemDocument",

    # Order models
    "OrderDocument",
    "OrderItemDocument",
    "ShippingAddress",
    "DisputeRecord",
    "RefundRecord",
    "PaymentDetails",
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "DisputeStatus",
    "RefundStatus",
]
