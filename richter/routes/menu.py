# richter/routes/menu.py
from fastapi import APIRouter, Depends

from richter.database import serialize
from richter.dependencies import get_menu_repository, get_review_repository
from richter.middleware.rbac import get_current_user, is_admin
from richter.models.menu import MenuRepository
from richter.models.review import ReviewRepository
from richter.schemas.menu import MenuItemCreate, MenuItemUpdate, ReviewCreate

menu_router = APIRouter(tags=["Menu"])


@menu_router.get("/menu")
async def list_menu(menu: MenuRepository = Depends(get_menu_repository)):
    return [serialize(item) for item in await menu.list_all()]


@menu_router.get("/menu/{item_id}")
async def get_menu_item(item_id: str, menu: MenuRepository = Depends(get_menu_repository)):
    return serialize(await menu.get(item_id))


@menu_router.post("/menu")
async def add_menu_item(
    item: MenuItemCreate,
    admin: dict = Depends(is_admin),
    menu: MenuRepository = Depends(get_menu_repository),
):
    return {"acknowledged": True, "insertedId": await menu.create(item.model_dump())}


@menu_router.patch("/menu/{item_id}")
async def update_menu_item(
    item_id: str,
    item: MenuItemUpdate,
    admin: dict = Depends(is_admin),
    menu: MenuRepository = Depends(get_menu_repository),
):
    result = await menu.update(item_id, item.model_dump(exclude_none=True))
    if result is None:
        return {"matchedCount": 0, "modifiedCount": 0}
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@menu_router.delete("/menu/{item_id}")
async def delete_menu_item(
    item_id: str,
    admin: dict = Depends(is_admin),
    menu: MenuRepository = Depends(get_menu_repository),
):
    result = await menu.delete(item_id)
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


@menu_router.get("/reviews")
async def list_reviews(reviews: ReviewRepository = Depends(get_review_repository)):
    return [serialize(r) for r in await reviews.list_all()]


@menu_router.post("/reviews")
async def add_review(
    review: ReviewCreate,
    user: dict = Depends(get_current_user),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    doc = {**review.model_dump(), "email": user["email"]}
    return {"acknowledged": True, "insertedId": await reviews.create(doc)}
