"""
Cart data models for database documents.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId


class CartItemDocument(BaseModel):
    """A product and the quantity the buyer intends to order."""
    product_id: str = Field(..., description="Product ID reference")
    quantity: int = Field(..., gt=0, description="Quantity in cart")


class CartDocument(BaseModel):
    """A buyer's cart. One per user, created on first add."""
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[str] = Field(None, alias="_id", description="Cart ID")
    user_id: str = Field(..., min_length=1, description="Owning user")
    items: List[CartItemDocument] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('id', mode='before')
    @classmethod
    def stringify_object_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @property
    def is_empty(self) -> bool:
        return not self.items
