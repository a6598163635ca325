"""
Cart operations.

A cart belongs to exactly one user and is created on the first add. Placing an
order from the cart claims its items with one atomic update (see
``claim_cart_items``); a failed placement puts them back.
"""
import logging
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..config.settings import get_settings
from ..core.errors import BadRequestError, NotFoundError
from ..core.principal import Principal
from ..models.cart import CartDocument, CartItemDocument
from .products import load_products

logger = logging.getLogger(__name__)
settings = get_settings()


async def find_cart(db: AsyncIOMotorDatabase, user_id: str) -> Optional[CartDocument]:
    doc = await db.carts.find_one({"user_id": user_id})
    return CartDocument.model_validate(doc) if doc else None


async def _save_cart(db: AsyncIOMotorDatabase, cart: CartDocument) -> CartDocument:
    now = datetime.utcnow()
    items = [item.model_dump() for item in cart.items]
    if cart.id is None:
        doc = {"user_id": cart.user_id, "items": items, "created_at": now, "updated_at": now}
        result = await db.carts.insert_one(doc)
        return cart.model_copy(update={"id": str(result.inserted_id), "created_at": now, "updated_at": now})

    await db.carts.update_one(
        {"user_id": cart.user_id},
        {"$set": {"items": items, "updated_at": now}},
    )
    return cart.model_copy(update={"updated_at": now})


def _merge_item(items: List[CartItemDocument], product_id: str, quantity: int) -> List[CartItemDocument]:
    merged = []
    found = False
    for item in items:
        if item.product_id == product_id:
            item = CartItemDocument(product_id=product_id, quantity=item.quantity + quantity)
            found = True
        merged.append(item)
    if not found:
        merged.append(CartItemDocument(product_id=product_id, quantity=quantity))
    return merged


def _check_quantity(product_id: str, quantity: int) -> None:
    if quantity > settings.max_item_quantity:
        raise BadRequestError(
            f"quantity cannot exceed {settings.max_item_quantity}",
            detail=f"product {product_id}: {quantity}",
        )


async def get_cart(db: AsyncIOMotorDatabase, principal: Principal) -> CartDocument:
    """The principal's cart; an unsaved empty cart if none exists yet."""
    return await find_cart(db, principal.id) or CartDocument(user_id=principal.id)


async def add_item(db: AsyncIOMotorDatabase, principal: Principal, product_id: str, quantity: int) -> CartDocument:
    """Add ``quantity`` of a product, creating the cart if needed."""
    if quantity <= 0:
        raise BadRequestError("quantity must be greater than zero")
    if product_id not in await load_products(db, [product_id]):
        raise NotFoundError(f"Product {product_id} not found")

    cart = await get_cart(db, principal)
    items = _merge_item(cart.items, product_id, quantity)
    _check_quantity(product_id, next(item.quantity for item in items if item.product_id == product_id))
    cart = cart.model_copy(update={"items": items})
    return await _save_cart(db, cart)


async def set_item_quantity(db: AsyncIOMotorDatabase, principal: Principal, product_id: str,
                            quantity: int) -> CartDocument:
    """Set an item's quantity; zero or less removes the item."""
    cart = await find_cart(db, principal.id)
    if cart is None:
        raise NotFoundError("Cart not found")
    if all(item.product_id != product_id for item in cart.items):
        raise NotFoundError(f"Product {product_id} is not in the cart")
    _check_quantity(product_id, quantity)

    if quantity <= 0:
        items = [item for item in cart.items if item.product_id != product_id]
    else:
        items = [
            CartItemDocument(product_id=product_id, quantity=quantity) if item.product_id == product_id else item
            for item in cart.items
        ]
    return await _save_cart(db, cart.model_copy(update={"items": items}))


async def remove_item(db: AsyncIOMotorDatabase, principal: Principal, product_id: str) -> CartDocument:
    cart = await find_cart(db, principal.id)
    if cart is None:
        raise NotFoundError("Cart not found")
    items = [item for item in cart.items if item.product_id != product_id]
    return await _save_cart(db, cart.model_copy(update={"items": items}))


async def claim_cart_items(db: AsyncIOMotorDatabase, user_id: str) -> List[CartItemDocument]:
    """
    Empty the user's cart and return what it held, in one atomic update.

    Two checkouts racing on the same cart cannot both receive its items.
    """
    previous = await db.carts.find_one_and_update(
        {"user_id": user_id},
        {"$set": {"items": [], "updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.BEFORE,
    )
    if previous is None:
        return []
    return CartDocument.model_validate(previous).items


async def restore_cart_items(db: AsyncIOMotorDatabase, user_id: str, items: List[CartItemDocument]) -> None:
    """Put claimed items back after a failed placement, merging with anything added since."""
    cart = await find_cart(db, user_id) or CartDocument(user_id=user_id)
    merged = cart.items
    for item in items:
        merged = _merge_item(merged, item.product_id, item.quantity)
    await _save_cart(db, cart.model_copy(update={"items": merged}))
    logger.info(f"Restored {len(items)} cart item(s) for user {user_id}")
