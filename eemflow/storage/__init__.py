"""Store adapters for events, relations and flows.

``create_stores`` wires the backend selected by ``Settings.storage_backend``.
"""

from __future__ import annotations

from dataclasses import dataclass

import redis.asyncio as aioredis

from eemflow.core.config import Settings
from eemflow.storage.memory import InMemoryEventSource, InMemoryFlowStore, InMemoryRelationStore
from eemflow.storage.redis import RedisEventSource, RedisFlowStore, RedisRelationStore
from eemflow.storage.repositories import EventSource, FlowStore, RelationStore


@dataclass
class Stores:
    events: EventSource
    relations: RelationStore
    flows: FlowStore


def create_stores(settings: Settings, redis_client: aioredis.Redis | None = None) -> Stores:
    """Build the store trio for the configured backend.

    Raises:
        ValueError: If the redis backend is selected without a client.
    """
    if settings.storage_backend == "redis":
        if redis_client is None:
            raise ValueError("A Redis client is required for the redis storage backend")
        prefix = settings.redis_key_prefix
        return Stores(
            events=RedisEventSource(redis_client, prefix),
            relations=RedisRelationStore(redis_client, prefix),
            flows=RedisFlowStore(redis_client, prefix),
        )
    return Stores(
        events=InMemoryEventSource(),
        relations=InMemoryRelationStore(),
        flows=InMemoryFlowStore(),
    )


__all__ = [
    "EventSource",
    "FlowStore",
    "InMemoryEventSource",
    "InMemoryFlowStore",
    "InMemoryRelationStore",
    "RedisEventSource",
    "RedisFlowStore",
    "RedisRelationStore",
    "RelationStore",
    "Stores",
    "create_stores",
]
