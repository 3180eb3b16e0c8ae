"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizdesk import __version__
from bizdesk.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from bizdesk.api.middleware.error_handler import setup_exception_handlers
from bizdesk.api.routes import (
    clients_router,
    health_router,
    products_router,
    reminders_router,
    sales_router,
    services_router,
    users_router,
)
from bizdesk.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Startup: migrations, connection pool, then the reminder scheduler.
    Shutdown runs in reverse so no sweep tick starts after the pool closes.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    # Initialize database
    try:
        from bizdesk.infrastructure.storage.sqlite import get_connection_pool
        from bizdesk.infrastructure.storage.sqlite.migrations.migrator import initialize_database

        await initialize_database()
        logger.info("database_initialized")

        await get_connection_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    # Start reminder sweep
    app.state.scheduler = None
    if settings.scheduler.enabled:
        from bizdesk.application.scheduler import build_reminder_scheduler

        scheduler = build_reminder_scheduler(settings)
        scheduler.start()
        app.state.scheduler = scheduler
    else:
        logger.info("scheduler_disabled")

    logger.info("application_started")

    yield

    # Shutdown
    logger.info("application_stopping")

    if app.state.scheduler is not None:
        app.state.scheduler.shutdown()

    try:
        from bizdesk.infrastructure.storage.sqlite import close_connection_pool

        await close_connection_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Small-business back office: clients, catalog, sales and reminders",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(reminders_router)
    app.include_router(clients_router)
    app.include_router(products_router)
    app.include_router(services_router)
    app.include_router(sales_router)

    return app


# Create app instance
app = create_app()


# Root health endpoint (for k8s/docker health checks)
@app.get("/health")
async def root_health() -> dict[str, str]:
    """Simple health check at root level."""
    return {
        "status": "healthy",
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "bizdesk.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
