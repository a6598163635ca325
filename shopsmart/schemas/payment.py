"""
Payment gateway callback schemas.
"""
from pydantic import BaseModel, Field


class PaymentVerificationRequest(BaseModel):
    """Confirmation posted back after the buyer pays at the gateway."""
    order_id: str = Field(..., min_length=1, description="ShopSmart order ID")
    gateway_order_id: str = Field(..., min_length=1, description="Gateway's order reference")
    payment_id: str = Field(..., min_length=1, description="Gateway's payment reference")
    signature: str = Field(..., min_length=1, description="Hex HMAC-SHA256 of 'gateway_order_id|payment_id'")
