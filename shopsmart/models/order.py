"""
Order data models for database documents.
These represent the actual structure of documents stored in MongoDB.
"""
from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId


class OrderStatus(str, Enum):
    PROCESSING = "Processing"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "CashOnDelivery"
    ONLINE = "Online"


class DisputeStatus(str, Enum):
    NONE = "none"
    RAISED = "raised"
    RESOLVED = "resolved"
    CLOSED = "closed"


class RefundStatus(str, Enum):
    NONE = "none"
    REQUESTED = "requested"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"


class OrderItemDocument(BaseModel):
    """Order item document model for items within an order."""
    product_id: str = Field(..., description="Product ID reference")
    quantity: int = Field(..., gt=0, description="Quantity ordered")

    # Recorded from the product lookup at order time
    product_name: Optional[str] = Field(None, description="Product title at time of order")
    price_per_item: float = Field(..., ge=0, description="Price per item at time of order")

    @field_validator('product_id')
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError('Invalid product ID format')
        return v

    @property
    def subtotal(self) -> float:
        return self.price_per_item * self.quantity


class ShippingAddress(BaseModel):
    """Shipping address information. Completeness is checked at placement."""
    street: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City")
    postal_code: Optional[str] = Field(None, description="Postal/ZIP code")
    country: Optional[str] = Field(None, description="Country")


class DisputeRecord(BaseModel):
    """Embedded dispute state, independent of fulfilment status."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    status: DisputeStatus = DisputeStatus.NONE
    reason: Optional[str] = None
    description: Optional[str] = None
    raised_at: Optional[datetime] = None
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None


class RefundRecord(BaseModel):
    """Embedded refund request and settlement state."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    status: RefundStatus = RefundStatus.NONE
    amount: Optional[float] = None
    reason: Optional[str] = None
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    transaction_id: Optional[str] = None


class PaymentDetails(BaseModel):
    """Gateway references recorded when a payment callback is verified."""
    model_config = ConfigDict(frozen=True)

    gateway_order_id: str
    payment_id: str
    verified_at: datetime


class OrderDocument(BaseModel):
    """
    Order document model representing the MongoDB document structure.
    This matches how orders are stored in the database.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[str] = Field(None, alias="_id", description="Order ID")
    user_id: str = Field(..., min_length=1, description="Buyer who placed the order")
    items: List[OrderItemDocument] = Field(..., min_length=1, description="Order items")
    total_price: float = Field(..., ge=0, description="Total order amount at creation")

    shipping_address: ShippingAddress = Field(..., description="Shipping address")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH_ON_DELIVERY)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    order_status: OrderStatus = Field(default=OrderStatus.PROCESSING)

    dispute: Optional[DisputeRecord] = None
    refund: Optional[RefundRecord] = None
    payment: Optional[PaymentDetails] = None

    # Timestamps
    created_at: Optional[datetime] = Field(None, description="Order creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator('id', mode='before')
    @classmethod
    def stringify_object_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v

    def product_ids(self) -> List[str]:
        return [item.product_id for item in self.items]

    def to_mongo(self) -> dict:
        """Document body for insert/$set; the ``_id`` is never written."""
        return self.model_dump(exclude={"id"})
