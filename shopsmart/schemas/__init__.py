"""
Schemas package for API request/response validation.
These models define the structure of data sent to and from the API endpoints.
"""

# Order schemas
from .order import (
    OrderItemRequest,
    ShippingAddressRequest,
    PlaceOrderRequest,
    AdminStatusUpdateRequest,
    ShopStatusUpdateRequest,
    ProductSummaryResponse,
    OrderItemResponse,
    OrderResponse,
    ShopOrderResponse,
    OrdersListResponse,
    ShopOrdersListResponse,
    SalesReportResponse,
)

# Cart schemas
from .cart import (
    AddCartItemRequest,
    UpdateCartItemRequest,
    CartItemResponse,
    CartResponse,
)

# Payment schemas
from .payment import PaymentVerificationRequest

# Common schemas
from .common import (
    HealthCheckResponse,
    RootResponse,
    ErrorResponse,
    SuccessResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

__all__ = [
    # Order schemas
    "OrderItemRequest",
    "ShippingAddressRequest",
    "PlaceOrderRequest",
    "AdminStatusUpdateRequest",
    "ShopStatusUpdateRequest",
    "ProductSummaryResponse",
    "OrderItemResponse",
    "OrderResponse",
    "ShopOrderResponse",
    "OrdersListResponse",
    "ShopOrdersListResponse",
    "SalesReportResponse",

    # Cart schemas
    "AddCartItemRequest",
    "UpdateCartItemRequest",
    "CartItemResponse",
    "CartResponse",

    # Payment schemas
    "PaymentVerificationRequest",

    # Common schemas
    "HealthCheckResponse",
    "RootResponse",
    "ErrorResponse",
    "SuccessResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
