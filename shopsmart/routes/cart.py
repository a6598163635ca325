"""
Cart endpoints.
"""
from fastapi import APIRouter, Depends

from ..config.database import get_database
from ..core.principal import Principal
from ..schemas.cart import AddCartItemRequest, CartResponse, UpdateCartItemRequest
from ..services import cart as cart_service
from ..services.products import load_products
from ..utils.auth import get_current_principal
from ..utils.serializers import cart_response

router = APIRouter(prefix="/cart", tags=["Cart"])


async def _respond(db, cart) -> CartResponse:
    products = await load_products(db, [item.product_id for item in cart.items])
    return cart_response(cart, products)


@router.get("", response_model=CartResponse)
async def get_cart(principal: Principal = Depends(get_current_principal), db=Depends(get_database)):
    return await _respond(db, await cart_service.get_cart(db, principal))


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddCartItemRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    cart = await cart_service.add_item(db, principal, request.product_id, request.quantity)
    return await _respond(db, cart)


@router.put("/items", response_model=CartResponse)
async def update_cart_item(
    request: UpdateCartItemRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    cart = await cart_service.set_item_quantity(db, principal, request.product_id, request.quantity)
    return await _respond(db, cart)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    cart = await cart_service.remove_item(db, principal, product_id)
    return await _respond(db, cart)
