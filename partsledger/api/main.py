"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from partsledger import __version__
from partsledger.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    setup_exception_handlers,
)
from partsledger.api.routes import (
    health_router,
    jobs_router,
    ledger_router,
    locations_router,
    parts_router,
)
from partsledger.config import configure_logging, get_logger, get_settings
from partsledger.core.exceptions import ConfigurationError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the connection pool on startup;
    closes the pool on shutdown.
    """
    from partsledger.application.services import reset_services
    from partsledger.infrastructure.storage.sqlite import close_pool, get_pool
    from partsledger.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    settings = get_settings()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    try:
        failed = [r for r in await run_migrations() if not r.success]
        if failed:
            raise ConfigurationError(
                f"Migration v{failed[0].version} failed: {failed[0].error}",
                code="MIGRATION_FAILED",
            )
        await get_pool()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise
    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await close_pool()
    reset_services()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Parts Ledger API",
        description="Parts inventory ledger with FIFO job costing",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(parts_router)
    app.include_router(ledger_router)
    app.include_router(jobs_router)
    app.include_router(locations_router)

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "partsledger.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    main()
