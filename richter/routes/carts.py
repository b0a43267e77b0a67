# richter/routes/carts.py
from fastapi import APIRouter, Depends

from richter.database import serialize
from richter.dependencies import get_cart_repository, path_email
from richter.models.cart import CartRepository
from richter.schemas.cart import CartItemCreate

cart_router = APIRouter(tags=["Carts"])


@cart_router.get("/carts")
async def list_cart(email: str = Depends(path_email), carts: CartRepository = Depends(get_cart_repository)):
    return [serialize(c) for c in await carts.list_for(email)]


@cart_router.post("/carts")
async def add_to_cart(item: CartItemCreate, carts: CartRepository = Depends(get_cart_repository)):
    return {"acknowledged": True, "insertedId": await carts.add(item.model_dump())}


@cart_router.delete("/carts/{cart_id}")
async def remove_from_cart(cart_id: str, carts: CartRepository = Depends(get_cart_repository)):
    result = await carts.delete(cart_id)
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
