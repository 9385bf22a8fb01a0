"""Health check endpoint.

Reports the configured storage backend and, for Redis, whether it responds.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request

from eemflow.api.version import API_VERSION
from eemflow.storage.redis import verify_redis_connectivity

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/api/v1/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Check the health of the storage backend.

    Returns:
        {"status": "healthy" | "degraded", "storage": {...}, "version": "..."}
    """
    redis_client = getattr(request.app.state, "redis_client", None)
    if redis_client is None:
        storage = {"backend": "memory", "status": "up"}
    elif await verify_redis_connectivity(redis_client):
        storage = {"backend": "redis", "status": "up"}
    else:
        logger.warning("Redis health check failed")
        storage = {"backend": "redis", "status": "down"}

    return {
        "status": "healthy" if storage["status"] == "up" else "degraded",
        "storage": storage,
        "version": API_VERSION,
    }
