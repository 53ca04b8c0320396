"""FastAPI application entry point and lifecycle management."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from membership_service.logging_config import configure_logging, get_logger
from membership_service.middleware import ContextMiddleware, RequestLoggingMiddleware

logger = get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Seeds the local member store from configuration on startup.
    """
    from membership_service.config import get_config
    from membership_service.repositories.member_store import get_member_store
    from membership_service.services.subscription_lifecycle import get_subscription_lifecycle

    logger.info("service_starting", version=VERSION)

    config = get_config()
    store = get_member_store()
    for member in config.seed_members:
        store.upsert(member)

    lifecycle = get_subscription_lifecycle()
    logger.info(
        "service_started",
        status="ready",
        members=store.count(),
        notifier=type(lifecycle.notifier).__name__,
        clock=type(lifecycle.clock).__name__,
    )
    try:
        yield
    finally:
        logger.info("service_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    json_format = os.getenv("LOG_FORMAT", "json").lower() == "json"
    configure_logging(log_level=log_level, json_format=json_format)

    app = FastAPI(
        title="Membership Service",
        description="Payment-verified membership renewal and expiration",
        version=VERSION,
        lifespan=lifespan,
    )

    include_request_details = os.getenv("LOG_REQUEST_DETAILS", "true").lower() == "true"
    app.add_middleware(RequestLoggingMiddleware, include_request_details=include_request_details)
    app.add_middleware(ContextMiddleware)

    from membership_service.api.maintenance import router as maintenance_router
    from membership_service.api.members import router as members_router

    app.include_router(members_router)
    app.include_router(maintenance_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "service": "membership-service",
            "status": "running",
            "version": VERSION,
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Detailed health check."""
        from membership_service.config import get_config
        from membership_service.repositories.member_store import get_member_store

        config = get_config()
        return {
            "status": "healthy",
            "members": str(get_member_store().count()),
            "notifications": config.notification_backend,
            "clock": "virtual" if config.use_virtual_clock else "system",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
            },
        )

    logger.info("app_created", endpoints=len(app.routes))
    return app


app = create_app()
