"""EEM Flow FastAPI application entry point.

Configures the FastAPI app with:
- Lifespan events that wire the configured stores into a FlowService
- Route registration (health, correlations, flows)
- Exception handlers mapping engine errors to HTTP status codes
- OpenAPI documentation at /docs (debug mode only)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from eemflow.api.routes import correlations, flows, health
from eemflow.api.version import API_VERSION
from eemflow.core.config import Settings, get_settings
from eemflow.core.errors import FlowNotFoundError
from eemflow.core.log import configure_logging
from eemflow.services.flows import FlowService, ProcessingDisabledError
from eemflow.storage import create_stores
from eemflow.storage.redis import create_redis_client, verify_redis_connectivity

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown.

    On startup: connect Redis when selected and build the flow service.
    On shutdown: close the Redis connection.
    """
    settings: Settings = app.state.settings

    redis_client = None
    if settings.storage_backend == "redis":
        redis_client = create_redis_client(settings)
        if await verify_redis_connectivity(redis_client):
            logger.info("Redis connection verified")
        else:
            logger.warning("Redis is not reachable; starting in degraded mode")
    app.state.redis_client = redis_client

    app.state.flow_service = FlowService(create_stores(settings, redis_client), settings)
    logger.info("Flow service ready (storage=%s)", settings.storage_backend)

    yield

    if redis_client is not None:
        await redis_client.aclose()
        logger.info("Redis connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Activity correlation and flow-graph engine",
        version=API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(correlations.router)
    app.include_router(flows.router)

    @app.exception_handler(FlowNotFoundError)
    async def flow_not_found_handler(request: Request, exc: FlowNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ProcessingDisabledError)
    async def processing_disabled_handler(request: Request, exc: ProcessingDisabledError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Validation error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app
