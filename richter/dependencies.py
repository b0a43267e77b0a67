# richter/dependencies.py
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from richter.core.config import Settings
from richter.models.cart import CartRepository
from richter.models.menu import MenuRepository
from richter.models.payment import PaymentRepository
from richter.models.review import ReviewRepository
from richter.models.user import AccountRepository
from richter.services.payments import PaymentService
from richter.schemas.user import normalize_email
from richter.services.verification import VerificationWorkflow


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


def get_account_repository(db=Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def get_menu_repository(db=Depends(get_db)) -> MenuRepository:
    return MenuRepository(db)


def get_cart_repository(db=Depends(get_db)) -> CartRepository:
    return CartRepository(db)


def get_review_repository(db=Depends(get_db)) -> ReviewRepository:
    return ReviewRepository(db)


def get_payment_repository(db=Depends(get_db)) -> PaymentRepository:
    return PaymentRepository(db)


def get_workflow(
    request: Request,
    accounts: AccountRepository = Depends(get_account_repository),
) -> VerificationWorkflow:
    state = request.app.state
    return VerificationWorkflow(accounts, state.mailer, state.identity_provider, state.settings)


def get_payment_service(
    request: Request,
    payments: PaymentRepository = Depends(get_payment_repository),
    carts: CartRepository = Depends(get_cart_repository),
) -> PaymentService:
    state = request.app.state
    return PaymentService(payments, carts, state.mailer, state.payment_gateway)


def path_email(email: str) -> str:
    return normalize_email(email)
