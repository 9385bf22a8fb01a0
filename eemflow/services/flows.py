"""Session-level pipeline: fetch events, correlate, build, persist, export.

The service owns every store interaction so the engine functions it
calls stay pure. Each call is independent; different sessions can be
processed concurrently.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from eemflow.core.config import Settings
from eemflow.core.errors import EemError, FlowNotFoundError, InvalidArgumentError
from eemflow.core.models import FlowGraph, Relation, parse_timestamp, utc_now
from eemflow.correlation import (
    DetectionConfig,
    create_manual_relation,
    detect_correlations,
    filter_relations,
    parse_id_list,
)
from eemflow.flow.analyzer import GraphAnalysis, analyze_graph
from eemflow.flow.builder import build_graph
from eemflow.flow.exporter import ExportFormat, export_graph
from eemflow.storage import Stores

logger = logging.getLogger(__name__)


class ProcessingDisabledError(EemError):
    """Raised when flow generation is switched off in settings."""


class FlowService:
    """Coordinates the correlation engine with the configured stores."""

    def __init__(self, stores: Stores, settings: Settings) -> None:
        self._stores = stores
        self._settings = settings

    def detection_config(self) -> DetectionConfig:
        return DetectionConfig(temporal_window=timedelta(seconds=self._settings.temporal_window_seconds))

    async def detect_for_session(
        self,
        session_id: str,
        strategies: str | Iterable[str] | None = "all",
        min_strength: float | None = None,
        max_events: int | None = None,
    ) -> list[Relation]:
        """Detect and persist correlations among a session's most recent events.

        Args:
            session_id: Session to analyze.
            strategies: Strategy selection passed to the detector.
            min_strength: Threshold; defaults to the configured value.
            max_events: Cap on analyzed events (most recent first).

        Returns:
            The saved relations, tagged with the session id.
        """
        if not self._settings.enable_correlation_analysis:
            logger.warning("Correlation analysis is disabled in settings")
            return []

        limit = self._settings.max_events_per_session if max_events is None else max_events
        if limit <= 0:
            raise InvalidArgumentError(f"max_events must be positive, got {limit}")
        threshold = self._settings.default_min_strength if min_strength is None else min_strength

        events = await self._stores.events.get_events_for_session(session_id)
        recent = sorted(events, key=lambda e: e.timestamp, reverse=True)[:limit]
        logger.info("Analyzing %d activities for correlations in session %s", len(recent), session_id)

        detected = detect_correlations(recent, strategies, threshold, self.detection_config())
        saved: list[Relation] = []
        for relation in detected:
            tagged = dataclasses.replace(relation, session_id=session_id)
            await self._stores.relations.save_relation(tagged)
            saved.append(tagged)

        logger.info("Detected and saved %d correlations for session %s", len(saved), session_id)
        return saved

    async def add_manual_correlation(
        self,
        event_ids: str | Iterable[str],
        relation_type: str,
        description: str = "",
        strength: float = 1.0,
        tags: str | Iterable[str] | None = None,
    ) -> Relation:
        relation = create_manual_relation(event_ids, relation_type, description, strength, tags)
        await self._stores.relations.save_relation(relation)
        return relation

    async def get_correlations(
        self,
        event_ids: str | Sequence[str],
        relation_types: str | Iterable[str] | None = None,
    ) -> list[Relation]:
        ids = parse_id_list(event_ids)
        if not ids:
            return []
        relations = await self._stores.relations.get_relations_for_events(ids)
        return filter_relations(relations, relation_types)

    async def generate_flow(
        self,
        session_id: str,
        name: str,
        window_minutes: int | None = None,
        categories: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> FlowGraph:
        """Build and persist a flow from a session's events in a time window.

        Relations already stored for those events become edges; without
        any, the builder falls back to a temporal chain. A window with no
        events yields (and stores) an empty flow.

        Raises:
            ProcessingDisabledError: If flow processing is disabled.
            InvalidArgumentError: If the window is not positive.
        """
        if not self._settings.enable_eulerian_processing:
            logger.warning("Flow processing is disabled in settings")
            raise ProcessingDisabledError("Flow processing is disabled in system configuration")

        minutes = self._settings.default_flow_window_minutes if window_minutes is None else window_minutes
        if minutes <= 0:
            raise InvalidArgumentError(f"Time window must be positive, got {minutes}")

        end = utc_now() if now is None else parse_timestamp(now)
        start = end - timedelta(minutes=minutes)
        in_window = await self._stores.events.get_events_in_time_range(
            start, end, self._settings.max_events_per_window
        )
        events = [e for e in in_window if e.session_id == session_id]
        if not events:
            logger.warning("No activities to build a flow for session %s", session_id)

        relations = await self._stores.relations.get_relations_for_events([e.id for e in events]) if events else []
        flow = build_graph(events, relations, name=name, categories=categories)
        await self._stores.flows.save_flow(flow)
        logger.info(
            "Generated flow %s (%s): %d nodes, %d edges",
            flow.id,
            flow.name,
            len(flow.nodes),
            len(flow.edges),
        )
        return flow

    async def get_flow(self, flow_id: str) -> FlowGraph | None:
        return await self._stores.flows.get_flow_by_id(flow_id)

    async def list_flows(self, start: datetime, end: datetime, max_count: int = 100) -> list[FlowGraph]:
        """List stored flows created in ``[start, end]``; naive bounds are read as UTC."""
        start = parse_timestamp(start)
        end = parse_timestamp(end)
        if end < start:
            raise InvalidArgumentError("Time range end must not precede its start")
        return await self._stores.flows.get_flows_in_time_range(start, end, max_count)

    async def analyze_flow(self, flow_id: str) -> GraphAnalysis:
        """Analyze a stored flow; an unknown id analyzes as the empty graph."""
        flow = await self._stores.flows.get_flow_by_id(flow_id)
        if flow is None:
            logger.info("Flow %s not found; returning empty analysis", flow_id)
        return analyze_graph(flow)

    async def export_flow(self, flow_id: str, fmt: str | ExportFormat = ExportFormat.JSON) -> str:
        """Export a stored flow.

        Raises:
            FlowNotFoundError: If the id is unknown.
            UnsupportedFormatError: For an unknown format.
        """
        flow = await self._stores.flows.get_flow_by_id(flow_id)
        if flow is None:
            logger.warning("Flow not found: %s", flow_id)
            raise FlowNotFoundError(flow_id)
        return export_graph(flow, fmt)
