"""
Payment gateway confirmation endpoint.
"""
from fastapi import APIRouter, Depends

from ..config.database import get_database
from ..core.principal import Principal
from ..schemas.common import SuccessResponse
from ..schemas.payment import PaymentVerificationRequest
from ..services import payments as payment_service
from ..services.orders import products_for
from ..utils.auth import get_current_principal
from ..utils.serializers import order_response

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/verify", response_model=SuccessResponse)
async def verify_payment(
    request: PaymentVerificationRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    order = await payment_service.verify_payment(db, principal, request)
    return SuccessResponse(
        message="Payment verified successfully",
        data=order_response(order, await products_for(db, [order])).model_dump(by_alias=True, mode="json"),
    )
