"""
Seller endpoints. Orders are always restricted to the seller's own items.
"""
from fastapi import APIRouter, Depends

from ..config.database import get_database
from ..core.principal import Principal
from ..schemas.order import (
    SalesReportResponse,
    ShopOrderResponse,
    ShopOrdersListResponse,
    ShopStatusUpdateRequest,
)
from ..services import shop as shop_service
from ..utils.auth import require_shop
from ..utils.serializers import sales_report_response, shop_order_response

router = APIRouter(prefix="/shop", tags=["Shop"])


@router.get("/orders", response_model=ShopOrdersListResponse)
async def list_shop_orders(principal: Principal = Depends(require_shop), db=Depends(get_database)):
    scoped, products = await shop_service.list_shop_orders(db, principal)
    return ShopOrdersListResponse(
        orders=[shop_order_response(view, products) for view in scoped],
        total=len(scoped),
    )


@router.get("/orders/{order_id}", response_model=ShopOrderResponse)
async def get_shop_order(order_id: str, principal: Principal = Depends(require_shop), db=Depends(get_database)):
    view, products = await shop_service.get_shop_order(db, principal, order_id)
    return shop_order_response(view, products)


@router.put("/orders/{order_id}/status", response_model=ShopOrderResponse)
async def advance_order_status(
    order_id: str,
    request: ShopStatusUpdateRequest,
    principal: Principal = Depends(require_shop),
    db=Depends(get_database),
):
    """Processing -> Shipped, or Shipped -> Delivered"""
    view, products = await shop_service.advance_order_status(db, principal, order_id, request.status)
    return shop_order_response(view, products)


@router.get("/sales", response_model=SalesReportResponse)
async def sales_report(principal: Principal = Depends(require_shop), db=Depends(get_database)):
    report, products = await shop_service.sales_report(db, principal)
    return sales_report_response(report, products)
