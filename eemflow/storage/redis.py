"""Redis-backed stores for events, relations and flows.

Records are stored as JSON strings under ``{prefix}:<kind>:<id>`` keys.
Sorted sets keyed by epoch-second timestamps index events per session and
globally, and flows by creation time; a set per event indexes the
relations that mention it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import datetime

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from eemflow.core.config import Settings
from eemflow.core.models import ActivityEvent, FlowGraph, Relation

logger = logging.getLogger(__name__)


def create_redis_client(settings: Settings) -> aioredis.Redis:
    """Create an async Redis client.

    Args:
        settings: Application settings with Redis connection details.

    Returns:
        An async Redis client instance.
    """
    client: aioredis.Redis = aioredis.from_url(settings.resolved_redis_url, decode_responses=True)
    return client


async def verify_redis_connectivity(client: aioredis.Redis) -> bool:
    """Check if Redis is reachable.

    Returns:
        True if Redis responds to PING, False otherwise.
    """
    try:
        return bool(await client.ping())
    except (RedisError, OSError):
        logger.exception("Failed to connect to Redis")
        return False


def _loads(raw: str | None) -> dict | None:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Skipping unreadable record in Redis")
        return None


class _RedisStore:
    def __init__(self, client: aioredis.Redis, prefix: str = "eem") -> None:
        self._client = client
        self._prefix = prefix

    def _key(self, *parts: str) -> str:
        return ":".join((self._prefix, *parts))

    async def _load_many(self, keys: list[str]) -> list[dict]:
        if not keys:
            return []
        raws = await self._client.mget(keys)
        return [data for data in (_loads(raw) for raw in raws) if data is not None]


class RedisEventSource(_RedisStore):
    async def save_event(self, event: ActivityEvent) -> str:
        score = event.timestamp.timestamp()
        await self._client.set(self._key("event", event.id), json.dumps(event.to_dict()))
        await self._client.zadd(self._key("session", event.session_id, "events"), {event.id: score})
        await self._client.zadd(self._key("events", "by_time"), {event.id: score})
        return event.id

    async def get_events_for_session(self, session_id: str) -> list[ActivityEvent]:
        ids = await self._client.zrange(self._key("session", session_id, "events"), 0, -1)
        rows = await self._load_many([self._key("event", i) for i in ids])
        return [ActivityEvent.from_dict(row) for row in rows]

    async def get_events_in_time_range(self, start: datetime, end: datetime, max_count: int) -> list[ActivityEvent]:
        """Most recent ``max_count`` events in ``[start, end]``, oldest first."""
        if max_count <= 0:
            return []
        ids = await self._client.zrevrangebyscore(
            self._key("events", "by_time"),
            end.timestamp(),
            start.timestamp(),
            start=0,
            num=max_count,
        )
        rows = await self._load_many([self._key("event", i) for i in reversed(ids)])
        return [ActivityEvent.from_dict(row) for row in rows]


class RedisRelationStore(_RedisStore):
    async def save_relation(self, relation: Relation) -> str:
        await self._client.set(self._key("relation", relation.id), json.dumps(relation.to_dict()))
        for event_id in set(relation.related_event_ids):
            await self._client.sadd(self._key("event", event_id, "relations"), relation.id)
        return relation.id

    async def get_relations_for_events(self, event_ids: Sequence[str]) -> list[Relation]:
        relation_ids: set[str] = set()
        for event_id in event_ids:
            relation_ids |= set(await self._client.smembers(self._key("event", event_id, "relations")))
        rows = await self._load_many([self._key("relation", r) for r in sorted(relation_ids)])
        relations = [Relation.from_dict(row) for row in rows]
        return sorted(relations, key=lambda r: r.timestamp)


class RedisFlowStore(_RedisStore):
    async def save_flow(self, flow: FlowGraph) -> str:
        await self._client.set(self._key("flow", flow.id), json.dumps(flow.to_dict()))
        await self._client.zadd(self._key("flows", "by_time"), {flow.id: flow.created_at.timestamp()})
        logger.info("Saved flow %s to Redis (%d nodes, %d edges)", flow.id, len(flow.nodes), len(flow.edges))
        return flow.id

    async def get_flow_by_id(self, flow_id: str) -> FlowGraph | None:
        data = _loads(await self._client.get(self._key("flow", flow_id)))
        return FlowGraph.from_dict(data) if data is not None else None

    async def get_flows_in_time_range(self, start: datetime, end: datetime, max_count: int) -> list[FlowGraph]:
        if max_count <= 0:
            return []
        ids = await self._client.zrangebyscore(
            self._key("flows", "by_time"),
            start.timestamp(),
            end.timestamp(),
            start=0,
            num=max_count,
        )
        rows = await self._load_many([self._key("flow", i) for i in ids])
        return [FlowGraph.from_dict(row) for row in rows]
