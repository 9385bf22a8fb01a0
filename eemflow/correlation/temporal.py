"""Temporal correlation: runs of events clustered inside a time window."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.config import DetectionConfig

logger = logging.getLogger(__name__)


def sort_by_timestamp(events: Sequence[ActivityEvent]) -> list[ActivityEvent]:
    """Stable chronological ordering; ties keep input order."""
    return sorted(events, key=lambda e: e.timestamp)


def run_strength(run_length: int, config: DetectionConfig) -> float:
    return min(1.0, run_length / config.temporal_run_scale)


def detect_temporal(
    events: Sequence[ActivityEvent],
    threshold: float,
    config: DetectionConfig,
) -> list[Relation]:
    """Emit one relation per qualifying run of temporally close events.

    For each anchor (in timestamp order) the run collects following events
    whose timestamp is within ``temporal_window`` of the anchor. Runs of two
    or more score ``min(1, len / temporal_run_scale)``. When a run has more
    than two members the scan skips ahead by ``len // temporal_skip_divisor``
    anchors to bound overlap between emitted runs.

    Args:
        events: Events in any order.
        threshold: Minimum strength to emit.
        config: Detection constants.

    Returns:
        Temporal relations, ordered by anchor time.
    """
    ordered = sort_by_timestamp(events)
    window = config.temporal_window
    window_minutes = window.total_seconds() / 60
    relations: list[Relation] = []

    i = 0
    while i < len(ordered):
        anchor = ordered[i]
        run = [anchor.id]
        for nxt in ordered[i + 1 :]:
            if nxt.timestamp - anchor.timestamp > window:
                break
            run.append(nxt.id)

        if len(run) > 1:
            strength = run_strength(len(run), config)
            if strength >= threshold:
                relations.append(
                    Relation(
                        relation_type=RelationType.TEMPORAL,
                        related_event_ids=run,
                        strength=strength,
                        description=f"Events temporally close within a {window_minutes:g} minute window",
                        tags=["auto-detected", "temporal-window"],
                    )
                )

        i += 1
        if len(run) > 2:
            i += len(run) // config.temporal_skip_divisor

    logger.debug("Temporal pass: %d relations from %d events", len(relations), len(ordered))
    return relations
