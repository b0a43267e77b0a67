# richter/services/payments.py
"""
Stripe payment intents and payment recording.

Recording a payment is two writes on two collections (insert the payment,
delete the paid cart lines) with no transaction between them. When the cart
cleanup fails the payment stays recorded with ``cartCleanup: "pending"`` so
``reconcile()`` can finish the job later.
"""
import logging
from decimal import Decimal, ROUND_DOWN
from typing import Optional

import stripe
from pymongo.errors import PyMongoError

from richter.core.config import Settings
from richter.core.exceptions import UpstreamFailure, ValidationError
from richter.database import object_id
from richter.models.cart import CartRepository
from richter.models.payment import CLEANUP_DONE, CLEANUP_PENDING, PaymentRepository
from richter.utils.email_utils import payment_receipt_email
from richter.utils.upstream import run_blocking

logger = logging.getLogger(__name__)


def to_cents(price) -> int:
    amount = (Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_DOWN)
    return int(amount)


class StripeGateway:
    component = "payment processor"

    def __init__(self, settings: Settings):
        self.api_key = settings.STRIPE_SECRET_KEY
        self.currency = settings.PAYMENT_CURRENCY
        self.timeout = settings.UPSTREAM_TIMEOUT_SECONDS

    async def create_payment_intent(self, amount: int, currency: Optional[str] = None) -> str:
        """Create a card PaymentIntent for ``amount`` cents and return its client secret."""
        try:
            intent = await run_blocking(
                self.component,
                self.timeout,
                stripe.PaymentIntent.create,
                api_key=self.api_key,
                amount=amount,
                currency=currency or self.currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as e:
            logger.error("Stripe PaymentIntent create failed: %s", e)
            raise UpstreamFailure(self.component, str(e.user_message or e)) from e
        return intent.client_secret


class PaymentService:
    def __init__(self, payments: PaymentRepository, carts: CartRepository, mailer, gateway):
        self.payments = payments
        self.carts = carts
        self.mailer = mailer
        self.gateway = gateway

    async def create_intent(self, price) -> str:
        amount = to_cents(price)
        if amount <= 0:
            raise ValidationError("price must be positive")
        return await self.gateway.create_payment_intent(amount)

    async def record(self, payment: dict) -> dict:
        cart_ids = payment.get("cartIds") or []
        for cart_id in cart_ids:
            object_id(cart_id)

        doc = await self.payments.insert({**payment, "cartCleanup": CLEANUP_PENDING})
        deleted = 0
        try:
            deleted = await self.carts.delete_many(cart_ids)
        except PyMongoError as e:
            logger.error(
                "Payment %s recorded for %s but cart cleanup failed: %s",
                doc["_id"], payment.get("email"), e,
            )
        else:
            await self.payments.set_cleanup(doc["_id"], CLEANUP_DONE)

        if payment.get("email"):
            subject, body = payment_receipt_email(payment)
            try:
                await self.mailer.send(payment["email"], subject, body)
            except UpstreamFailure as e:
                logger.warning("Receipt for payment %s not sent: %s", doc["_id"], e.message)

        return {
            "paymentResult": {"insertedId": str(doc["_id"])},
            "deletedResult": {"deletedCount": deleted},
        }

    async def reconcile(self) -> dict:
        pending = await self.payments.pending_cleanup()
        fixed = 0
        removed = 0
        for payment in pending:
            try:
                removed += await self.carts.delete_many(payment.get("cartIds") or [])
            except PyMongoError as e:
                logger.error("Reconcile of payment %s failed: %s", payment["_id"], e)
                continue
            await self.payments.set_cleanup(payment["_id"], CLEANUP_DONE)
            fixed += 1
        logger.info("Reconciled %d of %d pending payments", fixed, len(pending))
        return {"pending": len(pending), "reconciled": fixed, "deletedCount": removed}
