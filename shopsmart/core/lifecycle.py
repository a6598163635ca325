"""
Order lifecycle transitions.

Status, dispute and refund changes for a single order. Every function takes the
current ``OrderDocument`` and the acting ``Principal`` explicitly and returns a
new ``OrderDocument``; nothing here touches the database. Callers persist the
result with a single write.

Status graph::

    Processing -> Paid -> Shipped -> Delivered
    Processing -> Cancelled

Admins may overwrite status freely. Shops may only move Processing -> Shipped
and Shipped -> Delivered. Buyers may only cancel a Processing order.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from ..models.order import (
    DisputeRecord,
    DisputeStatus,
    OrderDocument,
    OrderStatus,
    PaymentDetails,
    PaymentStatus,
    RefundRecord,
    RefundStatus,
)
from .commands import (
    ApproveRefund,
    CloseDispute,
    ProcessRefund,
    RaiseDispute,
    RejectRefund,
    RequestRefund,
    ResolveDispute,
)
from .errors import BadRequestError, ForbiddenError, InvalidStateError
from .principal import Principal

logger = logging.getLogger(__name__)

# Fixed forward path available to sellers
SHOP_NEXT_STATUS = {
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}


def _evolve(order: OrderDocument, **changes: Any) -> OrderDocument:
    """Return a validated copy of ``order`` with ``changes`` applied."""
    data = order.model_dump(by_alias=True)
    data.update(changes)
    data["updated_at"] = datetime.utcnow()
    return OrderDocument.model_validate(data)


def _require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin privileges required")


def _status(value) -> OrderStatus:
    return OrderStatus(value)


# Order status

def admin_update_status(
    order: OrderDocument,
    principal: Principal,
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
) -> OrderDocument:
    """Overwrite order and/or payment status without checking legality."""
    _require_admin(principal)
    if status is None and payment_status is None:
        raise BadRequestError("status or payment_status is required")

    changes = {}
    if status is not None:
        changes["order_status"] = status
    if payment_status is not None:
        changes["payment_status"] = payment_status

    updated = _evolve(order, **changes)
    logger.info(
        f"Admin {principal.id} set order {order.id} "
        f"status={updated.order_status} payment={updated.payment_status}"
    )
    return updated


def cancel_order(order: OrderDocument, principal: Principal) -> OrderDocument:
    """Buyer cancellation, only from Processing."""
    if order.user_id != principal.id:
        raise ForbiddenError("Not authorized to cancel this order")

    current = _status(order.order_status)
    if current != OrderStatus.PROCESSING:
        raise InvalidStateError(
            f"only Processing orders can be cancelled (order is {current.value})",
            current=current.value,
            expected=OrderStatus.PROCESSING.value,
        )

    logger.info(f"Order {order.id} cancelled by buyer {principal.id}")
    return _evolve(order, order_status=OrderStatus.CANCELLED)


def allowed_shop_status(current: OrderStatus) -> Optional[OrderStatus]:
    """The single status a seller may move ``current`` to, if any."""
    return SHOP_NEXT_STATUS.get(_status(current))


def shop_owns_order(order: OrderDocument, owned_product_ids: Iterable[str]) -> bool:
    owned = set(owned_product_ids)
    return any(item.product_id in owned for item in order.items)


def advance_shop_status(
    order: OrderDocument,
    principal: Principal,
    requested: OrderStatus,
    owned_product_ids: Iterable[str],
) -> OrderDocument:
    """
    Seller fulfilment step along the fixed forward path.

    Args:
        order: Current order
        principal: Acting seller
        requested: Status the seller asks for
        owned_product_ids: IDs of products the seller owns

    Raises:
        ForbiddenError: If none of the order's items belong to the seller
        InvalidStateError: If ``requested`` is not the allowed next status
    """
    if not (principal.is_shop or principal.is_admin):
        raise ForbiddenError("Shop privileges required")
    if not shop_owns_order(order, owned_product_ids):
        raise ForbiddenError("Not authorized to update this order")

    current = _status(order.order_status)
    allowed = allowed_shop_status(current)
    requested = _status(requested)
    if allowed is None or requested != allowed:
        allowed_name = allowed.value if allowed else "none"
        logger.warning(
            f"Shop {principal.id} rejected transition on order {order.id}: "
            f"{current.value} -> {requested.value}"
        )
        raise InvalidStateError(
            f"Invalid status transition. Allowed: {current.value} -> {allowed_name}",
            current=current.value,
            expected=allowed.value if allowed else None,
        )

    logger.info(f"Shop {principal.id} moved order {order.id}: {current.value} -> {requested.value}")
    return _evolve(order, order_status=requested)


def confirm_payment(
    order: OrderDocument,
    principal: Principal,
    gateway_order_id: str,
    payment_id: str,
) -> OrderDocument:
    """Apply a verified gateway payment: Processing -> Paid, payment Completed."""
    if order.user_id != principal.id and not principal.is_admin:
        raise ForbiddenError("Not authorized to pay for this order")

    current = _status(order.order_status)
    if current == OrderStatus.PAID and order.payment is not None and order.payment.payment_id == payment_id:
        return order
    if current != OrderStatus.PROCESSING:
        raise InvalidStateError(
            f"only Processing orders can be paid (order is {current.value})",
            current=current.value,
            expected=OrderStatus.PROCESSING.value,
        )

    logger.info(f"Payment {payment_id} confirmed for order {order.id}")
    return _evolve(
        order,
        order_status=OrderStatus.PAID,
        payment_status=PaymentStatus.COMPLETED,
        payment=PaymentDetails(
            gateway_order_id=gateway_order_id,
            payment_id=payment_id,
            verified_at=datetime.utcnow(),
        ),
    )


# Disputes

def apply_dispute(order: OrderDocument, principal: Principal, command) -> OrderDocument:
    """Raise, resolve or close the order's dispute."""
    _require_admin(principal)
    now = datetime.utcnow()
    prior = order.dispute or DisputeRecord()

    if isinstance(command, RaiseDispute):
        # A new dispute replaces whatever was recorded before
        dispute = DisputeRecord(
            status=DisputeStatus.RAISED,
            reason=command.reason,
            description=command.description,
            raised_at=now,
        )
    elif isinstance(command, ResolveDispute):
        dispute = prior.model_copy(update={
            "status": DisputeStatus.RESOLVED.value,
            "resolution": command.resolution,
            "resolved_at": now,
        })
    elif isinstance(command, CloseDispute):
        dispute = prior.model_copy(update={"status": DisputeStatus.CLOSED.value})
    else:
        raise BadRequestError(f"Unknown dispute action: {getattr(command, 'action', command)!r}")

    logger.info(f"Dispute on order {order.id}: {DisputeStatus(prior.status).value} -> {dispute.status}")
    return _evolve(order, dispute=dispute)


# Refunds

# A new request may only start from no refund or a rejected one
REFUND_REQUESTABLE = (RefundStatus.NONE, RefundStatus.REJECTED)


def _require_refund_status(order: OrderDocument, required: RefundStatus, action: str) -> RefundRecord:
    refund = order.refund or RefundRecord()
    current = RefundStatus(refund.status)
    if current != required:
        raise InvalidStateError(
            f"Cannot {action} refund: refund must be {required.value} (is {current.value})",
            current=current.value,
            expected=required.value,
        )
    return refund


def apply_refund(order: OrderDocument, principal: Principal, command) -> OrderDocument:
    """Request, approve, reject or process a refund."""
    _require_admin(principal)
    now = datetime.utcnow()

    if isinstance(command, RequestRefund):
        current = RefundStatus((order.refund or RefundRecord()).status)
        if current not in REFUND_REQUESTABLE:
            raise InvalidStateError(
                f"Cannot request refund: refund must be none or rejected (is {current.value})",
                current=current.value,
                expected=RefundStatus.NONE.value,
            )
        if command.amount <= 0 or command.amount > order.total_price:
            raise BadRequestError(
                "refund amount must be greater than zero and not exceed the order total",
                detail=f"amount: {command.amount}, total_price: {order.total_price}",
            )
        refund = RefundRecord(
            status=RefundStatus.REQUESTED,
            amount=command.amount,
            reason=command.reason,
            requested_at=now,
        )
    elif isinstance(command, ApproveRefund):
        prior = _require_refund_status(order, RefundStatus.REQUESTED, "approve")
        refund = prior.model_copy(update={"status": RefundStatus.APPROVED.value})
    elif isinstance(command, RejectRefund):
        prior = _require_refund_status(order, RefundStatus.REQUESTED, "reject")
        refund = prior.model_copy(update={"status": RefundStatus.REJECTED.value})
    elif isinstance(command, ProcessRefund):
        prior = _require_refund_status(order, RefundStatus.APPROVED, "process")
        if not command.transaction_id:
            raise BadRequestError("transaction_id is required to process a refund")
        refund = prior.model_copy(update={
            "status": RefundStatus.PROCESSED.value,
            "processed_at": now,
            "transaction_id": command.transaction_id,
        })
    else:
        raise BadRequestError(f"Unknown refund action: {getattr(command, 'action', command)!r}")

    logger.info(f"Refund on order {order.id} is now {refund.status}")
    return _evolve(order, refund=refund)
