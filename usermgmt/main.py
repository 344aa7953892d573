"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from usermgmt.api import health, users
from usermgmt.config import settings
from usermgmt.core.exceptions import DatabaseConnectionError
from usermgmt.core.logging import setup_logging
from usermgmt.database.mongo import connect_database
from usermgmt.middleware.error_handler import register_error_handlers
from usermgmt.middleware.request_logging import RequestLoggingMiddleware
from usermgmt.repositories.user import UserRepository

setup_logging(settings.LOG_LEVEL, service=settings.APP_NAME)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raising here aborts startup; the app never serves without a database.
    try:
        db = connect_database(settings)
    except DatabaseConnectionError as exc:
        logger.critical("MongoDB connection error: %s", exc)
        raise
    UserRepository(db).ensure_indexes()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="API documentation for the User Management System",
        version=settings.APP_VERSION,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    # Outermost, so every response gets CORS headers, error envelopes included
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: check the database, then serve."""
    try:
        connect_database(settings)
    except DatabaseConnectionError as exc:
        logger.critical("MongoDB connection error: %s", exc)
        sys.exit(1)

    logger.info("Server running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
