# richter/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from richter import __version__
from richter.core.config import Settings, get_settings
from richter.core.exceptions import RichterError, UpstreamFailure
from richter.database import connect, ensure_indexes
from richter.routes.auth import auth_router
from richter.routes.carts import cart_router
from richter.routes.menu import menu_router
from richter.routes.payments import payment_router
from richter.routes.stats import stats_router
from richter.routes.users import user_router
from richter.services.identity_provider import FirebaseIdentityProvider
from richter.services.payments import StripeGateway
from richter.utils.email_utils import SmtpMailer

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database=None,
    mailer=None,
    identity_provider=None,
    payment_gateway=None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.db is None:
            client = connect(settings)
            app.state.db = client[settings.MONGO_DB_NAME]
        owned_provider = None
        if app.state.identity_provider is None:
            owned_provider = app.state.identity_provider = FirebaseIdentityProvider(settings)
        try:
            if client is not None:
                await client.admin.command("ping")
                logger.info("✅ MongoDB connected successfully.")
            await ensure_indexes(app.state.db)
        except PyMongoError as e:
            logger.error("❌ MongoDB connection failed: %s", e)
        yield
        if client is not None:
            client.close()
        if owned_provider is not None:
            owned_provider.close()

    app = FastAPI(title="Richter Restaurant API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database
    app.state.mailer = mailer or SmtpMailer(settings)
    app.state.identity_provider = identity_provider
    app.state.payment_gateway = payment_gateway or StripeGateway(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RichterError)
    async def richter_error_handler(request: Request, exc: RichterError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.code, exc.details)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error("%s %s database call failed: %s", request.method, request.url.path, exc)
        return await richter_error_handler(request, UpstreamFailure("database"))

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(menu_router)
    app.include_router(cart_router)
    app.include_router(payment_router)
    app.include_router(stats_router)

    @app.get("/")
    async def root():
        return {"message": "richter restaurant server"}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("richter.main:create_app", factory=True, host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
