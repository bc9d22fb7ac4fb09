import logging
from contextlib import asynccontextmanager
from datetime import datetime, UTC

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from src.app.api.error_handlers import register_error_handlers
from src.app.api.v1 import auth, clients
from src.app.config import Settings
from src.app.containers import API_MODULES, Container
from src.app.logging import access_log, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def default_lifespan(app: FastAPI):
    """Default application lifespan manager - prepares the database and closes pools on shutdown."""
    container: Container = app.state.container
    config: Settings = container.config()
    logger.info("Starting %s (%s)...", config.app_name, config.environment)

    db = container.database()
    if config.database.create_tables:
        await db.create_tables()

    yield

    logger.info("Shutting down %s...", config.app_name)
    await container.http_client().aclose()
    await db.dispose()


def create_app(container: Container, lifespan=default_lifespan) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: DI container providing settings, database and services.
        lifespan: Optional lifespan context manager. Defaults to default_lifespan.

    Returns:
        Configured FastAPI application.
    """
    container.wire(modules=API_MODULES)

    config = container.config()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        lifespan=lifespan,
    )

    # Attach container to app state for access in lifespan and routes
    app.state.container = container

    app.add_middleware(GZipMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(access_log(combined=not config.is_development))

    register_error_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix=config.api_prefix)
    app.include_router(clients.router, prefix=config.api_prefix)

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": config.environment,
            "version": config.app_version,
        }

    return app


def build_app() -> FastAPI:
    container = Container()
    configure_logging(container.config().log_level)
    return create_app(container=container)


app = build_app()
