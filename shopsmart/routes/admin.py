"""
Admin order endpoints: listing, status overwrite, disputes and refunds.
"""
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Depends, Query

from ..config.database import get_database
from ..core.commands import parse_dispute_command, parse_refund_command
from ..core.principal import Principal
from ..models.order import OrderStatus
from ..schemas.order import AdminStatusUpdateRequest, OrderResponse, OrdersListResponse
from ..services import orders as order_service
from ..utils.auth import require_admin
from ..utils.dependencies import pagination_params
from ..utils.serializers import order_response

router = APIRouter(prefix="/admin/orders", tags=["Admin"])


@router.get("", response_model=OrdersListResponse)
async def list_all_orders(
    order_status: Optional[OrderStatus] = Query(None, description="Filter by order status"),
    page: Tuple[int, int] = Depends(pagination_params),
    principal: Principal = Depends(require_admin),
    db=Depends(get_database),
):
    limit, offset = page
    orders, total = await order_service.list_all_orders(db, order_status, limit, offset)
    products = await order_service.products_for(db, orders)
    return OrdersListResponse(
        orders=[order_response(order, products) for order in orders],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    request: AdminStatusUpdateRequest,
    principal: Principal = Depends(require_admin),
    db=Depends(get_database),
):
    """Overwrite order and/or payment status"""
    order = await order_service.admin_update_status(db, principal, order_id, request)
    return order_response(order, await order_service.products_for(db, [order]))


@router.post("/{order_id}/dispute", response_model=OrderResponse)
async def dispute_action(
    order_id: str,
    payload: Dict[str, Any] = Body(..., examples=[{"action": "raise", "reason": "Damaged", "description": "Box crushed"}]),
    principal: Principal = Depends(require_admin),
    db=Depends(get_database),
):
    """Raise, resolve or close a dispute (``action``: raise | resolve | close)"""
    command = parse_dispute_command(payload)
    order = await order_service.apply_dispute_action(db, principal, order_id, command)
    return order_response(order, await order_service.products_for(db, [order]))


@router.post("/{order_id}/refund", response_model=OrderResponse)
async def refund_action(
    order_id: str,
    payload: Dict[str, Any] = Body(..., examples=[{"action": "request", "amount": 50, "reason": "Late delivery"}]),
    principal: Principal = Depends(require_admin),
    db=Depends(get_database),
):
    """Request, approve, reject or process a refund (``action``: request | approve | reject | process)"""
    command = parse_refund_command(payload)
    order = await order_service.apply_refund_action(db, principal, order_id, command)
    return order_response(order, await order_service.products_for(db, [order]))
