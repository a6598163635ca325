"""
The acting identity passed into every order operation.
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    BUYER = "user"
    SHOP = "shop"
    ADMIN = "admin"


class Principal(BaseModel):
    """Who is acting: user ID plus role, as asserted by the bearer token."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    role: Role = Role.BUYER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_shop(self) -> bool:
        return self.role == Role.SHOP
