"""Repository contracts the engine's callers persist through.

The engine itself performs no I/O; these protocols describe the narrow
store boundary that the flow service depends on. Absent records are
returned as ``None`` or empty lists, never raised.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from eemflow.core.models import ActivityEvent, FlowGraph, Relation


@runtime_checkable
class EventSource(Protocol):
    """Read access to captured activity events (plus ingestion for capture agents)."""

    async def save_event(self, event: ActivityEvent) -> str: ...

    async def get_events_for_session(self, session_id: str) -> list[ActivityEvent]: ...

    async def get_events_in_time_range(
        self,
        start: datetime,
        end: datetime,
        max_count: int,
    ) -> list[ActivityEvent]: ...


@runtime_checkable
class RelationStore(Protocol):
    async def save_relation(self, relation: Relation) -> str: ...

    async def get_relations_for_events(self, event_ids: Sequence[str]) -> list[Relation]: ...


@runtime_checkable
class FlowStore(Protocol):
    async def save_flow(self, flow: FlowGraph) -> str: ...

    async def get_flow_by_id(self, flow_id: str) -> FlowGraph | None: ...

    async def get_flows_in_time_range(
        self,
        start: datetime,
        end: datetime,
        max_count: int,
    ) -> list[FlowGraph]: ...
