"""In-process stores backed by dictionaries.

Used for local development, tests, and the ``memory`` storage backend.
Each store keeps its own state; instances are not shared between apps.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from eemflow.core.models import ActivityEvent, FlowGraph, Relation

logger = logging.getLogger(__name__)


class InMemoryEventSource:
    def __init__(self, events: Sequence[ActivityEvent] = ()) -> None:
        self._events: dict[str, ActivityEvent] = {}
        for event in events:
            self._events[event.id] = event

    async def save_event(self, event: ActivityEvent) -> str:
        self._events[event.id] = event
        return event.id

    async def get_events_for_session(self, session_id: str) -> list[ActivityEvent]:
        matches = [e for e in self._events.values() if e.session_id == session_id]
        return sorted(matches, key=lambda e: e.timestamp)

    async def get_events_in_time_range(self, start: datetime, end: datetime, max_count: int) -> list[ActivityEvent]:
        """Most recent ``max_count`` events with ``start <= timestamp <= end``, oldest first."""
        matches = sorted(
            (e for e in self._events.values() if start <= e.timestamp <= end),
            key=lambda e: e.timestamp,
        )
        return matches[-max_count:] if max_count > 0 else []


class InMemoryRelationStore:
    def __init__(self) -> None:
        self._relations: dict[str, Relation] = {}

    async def save_relation(self, relation: Relation) -> str:
        self._relations[relation.id] = relation
        return relation.id

    async def get_relations_for_events(self, event_ids: Sequence[str]) -> list[Relation]:
        """Relations touching any of the given events, in insertion order."""
        wanted = set(event_ids)
        return [r for r in self._relations.values() if wanted.intersection(r.related_event_ids)]


class InMemoryFlowStore:
    def __init__(self) -> None:
        self._flows: dict[str, FlowGraph] = {}

    async def save_flow(self, flow: FlowGraph) -> str:
        self._flows[flow.id] = flow
        logger.debug("Stored flow %s in memory", flow.id)
        return flow.id

    async def get_flow_by_id(self, flow_id: str) -> FlowGraph | None:
        return self._flows.get(flow_id)

    async def get_flows_in_time_range(self, start: datetime, end: datetime, max_count: int) -> list[FlowGraph]:
        matches = sorted(
            (f for f in self._flows.values() if start <= f.created_at <= end),
            key=lambda f: f.created_at,
        )
        return matches[:max_count] if max_count > 0 else []
