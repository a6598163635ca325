"""
FastAPI dependencies and common validations
"""
from typing import Tuple

from bson import ObjectId
from fastapi import Query

from ..config.settings import get_settings
from ..core.errors import BadRequestError

settings = get_settings()


def validate_object_id(object_id: str, resource_name: str = "resource") -> ObjectId:
    """
    Validate and convert string to ObjectId

    Args:
        object_id: String representation of ObjectId
        resource_name: Name of the resource for error messages

    Returns:
        Valid ObjectId instance

    Raises:
        BadRequestError: If ObjectId format is invalid
    """
    if not ObjectId.is_valid(object_id):
        raise BadRequestError(f"Invalid {resource_name} ID format: {object_id}")
    return ObjectId(object_id)


def pagination_params(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size,
                       description="Number of items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
) -> Tuple[int, int]:
    """Pagination query parameters as a (limit, offset) pair."""
    return limit, offset
