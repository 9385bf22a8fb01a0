"""Shared test fixtures for the EEM Flow test suite.

Provides an activity-event factory, in-memory and fake-Redis stores, a
flow service, and an HTTP test client wired to the FastAPI app.
"""

from __future__ import annotations

import fnmatch
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from eemflow.core.config import Settings
from eemflow.core.models import ActivityEvent
from eemflow.services.flows import FlowService
from eemflow.storage import Stores, create_stores

BASE_TS = datetime(2026, 1, 15, 10, 0, tzinfo=UTC)


def make_event(
    minutes: float = 0.0,
    activity_type: str = "code_edit",
    content: str = "",
    source: str = "vscode",
    session_id: str = "session-1",
    metadata: dict[str, Any] | None = None,
    event_id: str | None = None,
    **kwargs: Any,
) -> ActivityEvent:
    """Build an event ``minutes`` after BASE_TS."""
    extra: dict[str, Any] = dict(kwargs)
    if event_id is not None:
        extra["id"] = event_id
    return ActivityEvent(
        timestamp=BASE_TS + timedelta(minutes=minutes),
        activity_type=activity_type,
        content=content,
        source=source,
        session_id=session_id,
        metadata=metadata or {},
        **extra,
    )


@pytest.fixture
def event_factory() -> Callable[..., ActivityEvent]:
    return make_event


class FakeRedis:
    """Dictionary-backed stand-in for the subset of redis.asyncio used by the stores."""

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.sets: dict[str, set[str]] = {}
        self.closed = False

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True

    async def set(self, key: str, value: str) -> bool:
        self.strings[key] = value
        return True

    async def get(self, key: str) -> str | None:
        return self.strings.get(key)

    async def mget(self, keys: list[str]) -> list[str | None]:
        return [self.strings.get(k) for k in keys]

    async def zadd(self, key: str, mapping: dict[str, float]) -> int:
        zset = self.zsets.setdefault(key, {})
        added = len([m for m in mapping if m not in zset])
        zset.update(mapping)
        return added

    def _sorted(self, key: str) -> list[tuple[str, float]]:
        return sorted(self.zsets.get(key, {}).items(), key=lambda kv: (kv[1], kv[0]))

    async def zrange(self, key: str, start: int, end: int) -> list[str]:
        members = [m for m, _ in self._sorted(key)]
        return members[start:] if end == -1 else members[start : end + 1]

    async def zrangebyscore(self, key: str, min: float, max: float, start: int = 0, num: int | None = None) -> list[str]:
        members = [m for m, s in self._sorted(key) if min <= s <= max]
        return members[start:] if num is None else members[start : start + num]

    async def zrevrangebyscore(
        self, key: str, max: float, min: float, start: int = 0, num: int | None = None
    ) -> list[str]:
        members = [m for m, s in reversed(self._sorted(key)) if min <= s <= max]
        return members[start:] if num is None else members[start : start + num]

    async def sadd(self, key: str, *members: str) -> int:
        bucket = self.sets.setdefault(key, set())
        added = len(set(members) - bucket)
        bucket.update(members)
        return added

    async def smembers(self, key: str) -> set[str]:
        return set(self.sets.get(key, set()))

    def keys_matching(self, pattern: str) -> list[str]:
        every = [*self.strings, *self.zsets, *self.sets]
        return [k for k in every if fnmatch.fnmatch(k, pattern)]


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def test_settings() -> Settings:
    """Settings that never touch a real backend."""
    return Settings(
        app_env="testing",
        debug=False,
        storage_backend="memory",
        log_level="INFO",
    )


@pytest.fixture
def memory_stores(test_settings: Settings) -> Stores:
    return create_stores(test_settings)


@pytest.fixture
def flow_service(memory_stores: Stores, test_settings: Settings) -> FlowService:
    return FlowService(memory_stores, test_settings)


@pytest.fixture
async def test_app(test_settings: Settings, flow_service: FlowService) -> AsyncGenerator[Any, None]:
    """FastAPI app with the lifespan skipped and app.state set by hand."""
    from eemflow.api.main import create_app

    app = create_app(test_settings)
    app.state.redis_client = None
    app.state.flow_service = flow_service
    yield app


@pytest.fixture
async def client(test_app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
