"""FastAPI application factory for the local dev server.

The dev server serves the sitemap, RSS feed and robots.txt with content read
from the remote database using the public (non-admin) client.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from anacan.core.config import get_settings
from anacan.core.logging import bind_correlation_id, clear_context, configure_logging, get_logger
from anacan.infrastructure.appwrite import AppwriteClient, AppwriteError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the remote client on startup and closes it on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting Anacan dev server",
        version=settings.app_version,
        environment=settings.environment,
        endpoint=settings.appwrite_endpoint,
    )

    app.state.appwrite_client = AppwriteClient.from_settings(settings, admin=False)

    yield

    logger.info("Shutting down Anacan dev server")
    await app.state.appwrite_client.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Anacan.az dev server",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoint.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Returns 200 if the server is running. Does not contact the remote service."""
        return {
            "status": "healthy",
            "service": "Anacan",
            "version": get_settings().app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register content routes.

    Args:
        app: FastAPI application instance.
    """
    from anacan.infrastructure.api.routes import feed_router, sitemap_router

    app.include_router(sitemap_router, tags=["sitemap"])
    app.include_router(feed_router, tags=["feed"])


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(AppwriteError)
    async def remote_exception_handler(request, exc: AppwriteError):
        """Remote service failures surface as 502."""
        logger.error(
            "Remote service error",
            path=str(request.url),
            method=request.method,
            error=exc.message,
            code=exc.code,
        )
        return JSONResponse(
            status_code=502,
            content={"error": "Remote service error", "detail": exc.message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Log every request and attach a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
