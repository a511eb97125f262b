"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.adapter.database import Database
from src.api.error import (
    ClientError,
    client_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from src.api.routes import accounts, ledger

logger = logging.getLogger(__name__)


def init_sentry(config) -> None:
    if not config.ENABLE_SENTRY or not config.DSN_SENTRY:
        return

    import sentry_sdk

    sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
    logger.info(f"Sentry enabled for environment {config.SENTRY_ENVIRONMENT}")


def create_app(config, database: Database = None) -> FastAPI:
    """
    Build the ledger API

    Args:
        config: ApplicationConfig-like object
        database: Database to serve from (default: built from config.DB_URI)
    """
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    init_sentry(config)

    database = database or Database(config.DB_URI, echo=config.DB_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            await database.create_all()
        yield
        await database.dispose()

    app = FastAPI(title="Cashback Ledger API", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)"
            )
            return response

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(accounts.router, prefix=config.API_PREFIX)
    app.include_router(ledger.router, prefix=config.API_PREFIX)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
