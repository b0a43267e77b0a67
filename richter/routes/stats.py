# richter/routes/stats.py
from fastapi import APIRouter, Depends

from richter.dependencies import (
    get_account_repository,
    get_cart_repository,
    get_menu_repository,
    get_payment_repository,
    get_review_repository,
    path_email,
)
from richter.middleware.rbac import get_current_user, is_admin
from richter.models.cart import CartRepository
from richter.models.menu import MenuRepository
from richter.models.payment import RESERVATION, PaymentRepository
from richter.models.review import ReviewRepository
from richter.models.user import AccountRepository
from richter.schemas.stats import AdminStats, UserStats

stats_router = APIRouter(tags=["Stats"])


@stats_router.get("/admin-stats", response_model=AdminStats)
async def admin_stats(
    admin: dict = Depends(is_admin),
    accounts: AccountRepository = Depends(get_account_repository),
    menu: MenuRepository = Depends(get_menu_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
):
    return {
        "users": await accounts.count(),
        "menuItems": await menu.count(),
        "orders": await payments.count(),
        "revenue": await payments.revenue(),
    }


@stats_router.get("/user-stats/{email}", response_model=UserStats)
async def user_stats(
    email: str = Depends(path_email),
    user: dict = Depends(get_current_user),
    carts: CartRepository = Depends(get_cart_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    return {
        "carts": await carts.count_for(email),
        "payments": await payments.count({"email": email}),
        "reservations": await payments.count({"email": email, "type": RESERVATION}),
        "reviews": await reviews.count_for(email),
        "spent": await payments.revenue(email),
    }
