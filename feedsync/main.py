"""
Feedsync API - supplier feed ingestion service
"""
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from feedsync.api.v1 import api_router
from feedsync.core.config import settings
from feedsync.core.database import db_manager, init_db
from feedsync.core.exceptions import (
    BaseAPIException,
    handle_api_exception,
    handle_unexpected_exception,
    handle_validation_exception,
)
from feedsync.core.logging import log, setup_logging
from feedsync.middleware import RequestIDMiddleware, TimingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events
    """
    # Startup
    setup_logging()
    log.info("Starting Feedsync API", version=settings.version, env=settings.environment)

    db_manager.init()
    if settings.db_create_tables:
        await init_db()

    yield

    # Shutdown
    log.info("Shutting down Feedsync API")
    await db_manager.close()


def create_application() -> FastAPI:
    """
    Create FastAPI application with all configurations
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json" if settings.debug else None,
        docs_url=f"{settings.api_v1_prefix}/docs" if settings.debug else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "feeds", "description": "Supplier feed runs"},
            {"name": "import", "description": "Single-vendor catalog import"},
        ],
    )

    # Add custom exception handlers
    app.add_exception_handler(BaseAPIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)

    # Add middleware stack (order matters!)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_origins],
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Process-Time"],
        )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(TimingMiddleware)

    # Add API routes
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    # Root endpoint
    @app.get("/", tags=["root"])
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information"""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.environment,
        }

    return app


# Create the application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feedsync.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
        access_log=False,
    )
