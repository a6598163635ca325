"""
Typed dispute and refund commands.

Each admin action on a dispute or refund is its own model, discriminated by the
``action`` field. Raw payloads are parsed here, before anything reaches the
transition logic, so the lifecycle functions only ever see well-formed commands.
"""
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import BadRequestError


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)


# Dispute commands

class RaiseDispute(_Command):
    action: Literal["raise"]
    reason: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class ResolveDispute(_Command):
    action: Literal["resolve"]
    resolution: str = Field(..., min_length=1)


class CloseDispute(_Command):
    action: Literal["close"]


DisputeCommand = Annotated[
    Union[RaiseDispute, ResolveDispute, CloseDispute],
    Field(discriminator="action"),
]


# Refund commands

DEFAULT_REFUND_REASON = "No reason provided"


class RequestRefund(_Command):
    action: Literal["request"]
    amount: float = Field(..., gt=0)
    reason: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("reason")
    @classmethod
    def default_reason(cls, v):
        return v or DEFAULT_REFUND_REASON


class ApproveRefund(_Command):
    action: Literal["approve"]


class RejectRefund(_Command):
    action: Literal["reject"]


class ProcessRefund(_Command):
    action: Literal["process"]
    transaction_id: str = Field(..., min_length=1)


RefundCommand = Annotated[
    Union[RequestRefund, ApproveRefund, RejectRefund, ProcessRefund],
    Field(discriminator="action"),
]


_dispute_adapter = TypeAdapter(DisputeCommand)
_refund_adapter = TypeAdapter(RefundCommand)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_dispute_command(payload: Dict[str, Any]):
    """Validate a raw dispute payload into a typed command."""
    try:
        return _dispute_adapter.validate_python(payload)
    except ValidationError as exc:
        raise BadRequestError("Invalid dispute action", detail=_describe(exc)) from exc


def parse_refund_command(payload: Dict[str, Any]):
    """Validate a raw refund payload into a typed command."""
    try:
        return _refund_adapter.validate_python(payload)
    except ValidationError as exc:
        raise BadRequestError("Invalid refund action", detail=_describe(exc)) from exc
