"""
Product data models for database documents.
Products are read-only here: ownership and pricing lookups for orders.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId


class ProductReview(BaseModel):
    """A buyer's review of a product."""
    user_id: str = Field(..., description="Reviewer reference")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Review text")


class ProductDocument(BaseModel):
    """
    Product document model representing the MongoDB document structure.
    ``shop_id`` is the owning seller, or None for admin-added products.
    """
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[str] = Field(None, alias="_id", description="Product ID")
    title: str = Field(..., min_length=1, max_length=200, description="Product title")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., ge=0, description="Current product price")
    stock: int = Field(default=0, ge=0, description="Available stock quantity")
    category: Optional[str] = Field(None, description="Product category")
    shop_id: Optional[str] = Field(None, description="Owning seller's user ID")

    rating: float = Field(default=0, ge=0, le=5, description="Average review rating")
    num_reviews: int = Field(default=0, ge=0, description="Number of reviews")
    reviews: List[ProductReview] = Field(default_factory=list)

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator('id', mode='before')
    @classmethod
    def stringify_object_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v
