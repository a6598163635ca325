"""
Order lifecycle engine: transitions, shop scoping and pricing.
These modules are pure; persistence lives in ``shopsmart.services``.
"""
from .errors import (
    OrderServiceError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    InvalidStateError,
)
from .principal import Principal, Role

__all__ = [
    "OrderServiceError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "InvalidStateError",
    "Principal",
    "Role",
]
