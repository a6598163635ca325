"""
Payment gateway callback verification.

The gateway signs ``"<gateway_order_id>|<payment_id>"`` with HMAC-SHA256 using
the shared secret and sends the hex digest along with the confirmation.
"""
import hashlib
import hmac
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config.settings import get_settings
from ..core import lifecycle
from ..core.errors import BadRequestError
from ..core.principal import Principal
from ..models.order import OrderDocument
from ..schemas.payment import PaymentVerificationRequest
from .orders import get_order_document, save_order

logger = logging.getLogger(__name__)
settings = get_settings()


def compute_signature(gateway_order_id: str, payment_id: str, secret: str) -> str:
    message = f"{gateway_order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def signature_matches(gateway_order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = compute_signature(gateway_order_id, payment_id, secret)
    provided = signature.strip().lower().encode("utf-8")
    return hmac.compare_digest(expected.encode("utf-8"), provided)


async def verify_payment(
    db: AsyncIOMotorDatabase,
    principal: Principal,
    request: PaymentVerificationRequest,
) -> OrderDocument:
    """
    Check the gateway signature and mark the order paid

    Raises:
        BadRequestError: If the signature does not match
        NotFoundError: If the order does not exist
        ForbiddenError: If the order is not the principal's
        InvalidStateError: If the order is no longer awaiting payment
    """
    if not signature_matches(request.gateway_order_id, request.payment_id, request.signature,
                             settings.payment_key_secret):
        logger.warning(f"Payment verification failed for order {request.order_id}")
        raise BadRequestError("payment verification failed")

    order = await get_order_document(db, request.order_id)
    updated = lifecycle.confirm_payment(order, principal, request.gateway_order_id, request.payment_id)
    if updated is order:
        return order
    return await save_order(db, updated)
