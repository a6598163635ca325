"""
Product lookups used for pricing, ownership and response population.
"""
from typing import Dict, Iterable

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..models.product import ProductDocument


async def load_products(db: AsyncIOMotorDatabase, product_ids: Iterable[str]) -> Dict[str, ProductDocument]:
    """
    Fetch products by ID in a single query

    Args:
        product_ids: String product IDs; malformed IDs are skipped
        db: Database instance

    Returns:
        Dictionary mapping product_id -> ProductDocument for products that exist
    """
    object_ids = list({ObjectId(pid) for pid in product_ids if ObjectId.is_valid(pid)})
    if not object_ids:
        return {}

    cursor = db.products.find({"_id": {"$in": object_ids}})
    found = await cursor.to_list(length=None)
    return {str(doc["_id"]): ProductDocument.model_validate(doc) for doc in found}


async def owned_products(db: AsyncIOMotorDatabase, shop_id: str) -> Dict[str, ProductDocument]:
    """All products owned by a seller, keyed by string ID."""
    cursor = db.products.find({"shop_id": shop_id})
    found = await cursor.to_list(length=None)
    return {str(doc["_id"]): ProductDocument.model_validate(doc) for doc in found}
