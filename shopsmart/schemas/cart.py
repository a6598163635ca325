"""
Cart API schemas.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId

from ..config.settings import get_settings
from .order import ProductSummaryResponse

settings = get_settings()


class AddCartItemRequest(BaseModel):
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(1, gt=0, le=settings.max_item_quantity, description="Quantity to add")

    @field_validator('product_id')
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError('Invalid product ID format')
        return v


class UpdateCartItemRequest(BaseModel):
    """Set a cart item's quantity; zero or less removes it."""
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., le=settings.max_item_quantity, description="New quantity")


class CartItemResponse(BaseModel):
    product_id: str
    product: Optional[ProductSummaryResponse] = None
    quantity: int


class CartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    user_id: str
    items: List[CartItemResponse] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
