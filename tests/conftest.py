"""Shared fixtures: an in-memory MongoDB and recording fakes for every upstream."""
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from richter.core.config import Settings
from richter.core.exceptions import UpstreamFailure
from richter.database import ensure_indexes
from richter.main import create_app
from richter.models.user import AccountRepository
from richter.services.verification import VerificationWorkflow
from richter.utils.auth_utils import create_access_token


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to_email, subject, body):
        if self.fail:
            raise UpstreamFailure("email")
        self.sent.append({"to": to_email, "subject": subject, "body": body})


class FakeIdentityProvider:
    def __init__(self):
        self.verified = []
        self.deleted = []
        self.fail = False

    async def mark_email_verified(self, uid):
        self.verified.append(uid)
        if self.fail:
            raise UpstreamFailure("identity provider")

    async def delete_by_email(self, email):
        self.deleted.append(email)
        if self.fail:
            raise UpstreamFailure("identity provider")


class FakePaymentGateway:
    def __init__(self):
        self.intents = []

    async def create_payment_intent(self, amount, currency=None):
        self.intents.append(amount)
        return f"pi_{amount}_secret"


@pytest.fixture
def settings():
    return Settings(
        JWT_SECRET_KEY="test-secret",
        VERIFY_URL_BASE="http://testserver",
        MONGO_DB_NAME="richter_test",
    )


@pytest.fixture
def db():
    return AsyncMongoMockClient()["richter_test"]


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
async def accounts(db):
    await ensure_indexes(db)
    return AccountRepository(db)


@pytest.fixture
def workflow(accounts, mailer, identity_provider, settings):
    return VerificationWorkflow(accounts, mailer, identity_provider, settings)


@pytest.fixture
def app(settings, db, mailer, identity_provider, payment_gateway):
    return create_app(
        settings,
        database=db,
        mailer=mailer,
        identity_provider=identity_provider,
        payment_gateway=payment_gateway,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_header(settings):
    def make(email):
        token = create_access_token({"email": email}, settings=settings)
        return {"Authorization": f"Bearer {token}"}

    return make
