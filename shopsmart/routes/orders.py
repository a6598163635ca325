"""
Buyer order endpoints.
"""
from typing import Tuple

from fastapi import APIRouter, Depends

from ..config.database import get_database
from ..core.principal import Principal
from ..schemas.order import OrderResponse, OrdersListResponse, PlaceOrderRequest
from ..services import orders as order_service
from ..utils.auth import get_current_principal
from ..utils.dependencies import pagination_params
from ..utils.serializers import order_response

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    request: PlaceOrderRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """Place an order from explicit items, or from the cart when no items are given"""
    order = await order_service.place_order(db, principal, request)
    return order_response(order, await order_service.products_for(db, [order]))


@router.get("/mine", response_model=OrdersListResponse)
async def list_my_orders(
    page: Tuple[int, int] = Depends(pagination_params),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    limit, offset = page
    orders, total = await order_service.list_my_orders(db, principal, limit, offset)
    products = await order_service.products_for(db, orders)
    return OrdersListResponse(
        orders=[order_response(order, products) for order in orders],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    order = await order_service.get_order_for(db, principal, order_id)
    return order_response(order, await order_service.products_for(db, [order]))


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """Cancel one of your own orders while it is still Processing"""
    order = await order_service.cancel_order(db, principal, order_id)
    return order_response(order, await order_service.products_for(db, [order]))
