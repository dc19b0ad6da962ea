"""Users API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UsersApiError → {success: false, ...} JSON
    - CORS configured from settings (default: any origin)
    - The pool manager is built on startup, stored on app.state, and drained
      on shutdown after uvicorn has finished in-flight requests
    - A failed startup connection check is logged, never fatal
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api.api.error_handlers import register_error_handlers
from users_api.api.routes import health, root, users
from users_api.config import get_settings
from users_api.infrastructure.database import create_db_manager
from users_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = create_db_manager(settings)
    app.state.db_manager = db_manager
    await db_manager.check_connection()
    db_manager.start_idle_reaper()
    logger.info(f"API server running on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Pod: {settings.hostname}")
    try:
        yield
    finally:
        logger.info("Shutdown requested, shutting down gracefully")
        await db_manager.close()


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title=settings.app_name, version=settings.app_version,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(root.router)
    application.include_router(health.router)
    application.include_router(users.router)
    register_error_handlers(application)
    return application


app = create_app()
