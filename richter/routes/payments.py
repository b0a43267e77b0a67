# richter/routes/payments.py
from fastapi import APIRouter, Depends

from richter.database import serialize
from richter.dependencies import get_payment_repository, get_payment_service, path_email
from richter.middleware.rbac import get_current_user, is_admin, require_self
from richter.models.payment import RESERVATION, PaymentRepository
from richter.schemas.payment import PaymentCreate, PaymentIntentRequest
from richter.services.payments import PaymentService

payment_router = APIRouter(tags=["Payments"])


@payment_router.post("/create-payment-intent")
async def create_payment_intent(
    data: PaymentIntentRequest,
    service: PaymentService = Depends(get_payment_service),
):
    return {"clientSecret": await service.create_intent(data.price)}


@payment_router.get("/payments/reservation/{email}")
async def list_reservations(
    email: str = Depends(path_email),
    user: dict = Depends(get_current_user),
    payments: PaymentRepository = Depends(get_payment_repository),
):
    require_self(email, user)
    return [serialize(p) for p in await payments.list_for(email, RESERVATION)]


@payment_router.get("/payments/{email}")
async def list_payments(
    email: str = Depends(path_email),
    user: dict = Depends(get_current_user),
    payments: PaymentRepository = Depends(get_payment_repository),
):
    require_self(email, user)
    return [serialize(p) for p in await payments.list_for(email)]


@payment_router.post("/payments/reconcile")
async def reconcile_payments(
    admin: dict = Depends(is_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.reconcile()


@payment_router.post("/payments")
async def record_payment(
    payment: PaymentCreate,
    service: PaymentService = Depends(get_payment_service),
):
    return await service.record(payment.model_dump())
