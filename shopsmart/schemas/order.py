"""
Order API schemas for request/response validation.
These models define the structure of data sent to and from the API.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId

from ..config.settings import get_settings
from ..models.order import (
    DisputeRecord,
    OrderStatus,
    PaymentDetails,
    PaymentMethod,
    PaymentStatus,
    RefundRecord,
    ShippingAddress,
)

settings = get_settings()


# Request Schemas

class OrderItemRequest(BaseModel):
    """Request schema for an explicit order item."""
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., le=settings.max_item_quantity, description="Quantity ordered (must be positive)")

    @field_validator('product_id')
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError('Invalid product ID format')
        return v


class ShippingAddressRequest(BaseModel):
    """Shipping address as submitted; completeness is checked at placement."""
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    """
    Request schema for placing an order.

    With ``items`` the order is built from that list and the cart is left alone;
    without it the buyer's cart is consumed.
    """
    items: Optional[List[OrderItemRequest]] = Field(
        None, max_length=settings.max_order_items, description="Explicit order items"
    )
    shipping_address: ShippingAddressRequest = Field(default_factory=ShippingAddressRequest)
    payment_method: PaymentMethod = Field(PaymentMethod.CASH_ON_DELIVERY, description="Payment method")


class AdminStatusUpdateRequest(BaseModel):
    """Request schema for the admin status overwrite."""
    status: Optional[OrderStatus] = Field(None, description="New order status")
    payment_status: Optional[PaymentStatus] = Field(None, description="New payment status")


class ShopStatusUpdateRequest(BaseModel):
    """Request schema for a seller's fulfilment step."""
    status: OrderStatus = Field(..., description="Requested next status")


# Response Schemas

class ProductSummaryResponse(BaseModel):
    """Current product fields shown alongside an order item."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Product ID")
    title: str = Field(..., description="Product title")
    price: float = Field(..., description="Current product price")


class OrderItemResponse(BaseModel):
    """Response schema for order items."""
    product_id: str = Field(..., description="Product ID")
    product: Optional[ProductSummaryResponse] = Field(None, description="Current product, if it still exists")
    product_name: Optional[str] = Field(None, description="Product title at time of order")
    quantity: int = Field(..., description="Quantity ordered")
    price_per_item: float = Field(..., description="Price per item at time of order")


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Order ID")
    user_id: str = Field(..., description="Buyer who placed the order")
    items: List[OrderItemResponse] = Field(..., description="Order items")
    total_price: float = Field(..., description="Total order amount at creation")
    shipping_address: ShippingAddress = Field(..., description="Shipping address")
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    order_status: OrderStatus
    dispute: Optional[DisputeRecord] = None
    refund: Optional[RefundRecord] = None
    payment: Optional[PaymentDetails] = None
    created_at: Optional[datetime] = Field(None, description="Order creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class ShopOrderResponse(OrderResponse):
    """An order restricted to one seller's items."""
    shop_total_price: float = Field(..., description="Seller's items at current prices")
    shop_item_count: int = Field(..., description="Seller's item quantity")


class OrdersListResponse(BaseModel):
    """Response schema for order list with pagination."""
    orders: List[OrderResponse] = Field(..., description="List of orders")
    total: int = Field(..., description="Total number of orders matching filters")
    limit: int = Field(..., description="Number of orders returned")
    offset: int = Field(..., description="Number of orders skipped")
    has_more: bool = Field(..., description="Whether there are more orders available")


class ShopOrdersListResponse(BaseModel):
    """Response schema for a seller's scoped orders."""
    orders: List[ShopOrderResponse]
    total: int


class SalesReportResponse(BaseModel):
    """Seller sales figures across all scoped orders."""
    total_sales: float
    total_orders: int
    total_items_sold: int
    recent_orders: List[ShopOrderResponse]
