"""FastAPI application: main entry point."""

import os
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from employee_manager.config import Settings, get_settings
from employee_manager.core.exceptions import register_exception_handlers
from employee_manager.core.logging import configure_logging
from employee_manager.core.middleware import setup_middleware
from employee_manager.infrastructure.database import MongoStore
from employee_manager.infrastructure.file_storage import PictureStorage
from employee_manager.interfaces.api.auth import router as auth_router
from employee_manager.interfaces.api.employees import router as employees_router
from employee_manager.interfaces.api.health import router as health_router

logger = structlog.get_logger(__name__)


def check_secret(settings: Settings) -> None:
    if not settings.uses_default_secret:
        return
    if settings.ENVIRONMENT == "production":
        raise RuntimeError("SECRET_KEY must be set in production; refusing to sign tokens with the default")
    logger.warning("SECRET_KEY is the development default; set SECRET_KEY before deploying")


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """Build the application around an explicitly constructed store.

    The store is created here only when the caller does not pass one; it is
    held on `app.state` for the lifetime of the process.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    store = store if store is not None else MongoStore(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown events."""
        logger.info("Starting Employee Manager...", env=settings.ENVIRONMENT)
        check_secret(settings)
        await store.connect()

        yield

        await store.close()
        logger.info("Employee Manager stopped")

    app = FastAPI(
        title="Employee Manager",
        description="Employee records and user accounts over MongoDB",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.pictures = PictureStorage(
        settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_size_mb=settings.MAX_UPLOAD_SIZE_MB,
    )

    setup_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(employees_router)

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    return app


def run() -> None:
    """Console entry point: `employee-manager-server`."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
