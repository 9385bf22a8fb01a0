"""Causal correlation: adjacent events that share a type or a source.

Sequential events of the same activity type or from the same tool are
treated as potentially causal; tighter gaps earn a bonus.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.config import DetectionConfig
from eemflow.correlation.temporal import sort_by_timestamp

logger = logging.getLogger(__name__)


def causal_strength(gap: timedelta, config: DetectionConfig) -> float:
    """Base strength plus the close-gap bonus, or else the near-gap bonus."""
    strength = config.causal_base_strength
    if gap <= config.causal_close_gap:
        strength += config.causal_close_bonus
    elif gap <= config.causal_near_gap:
        strength += config.causal_near_bonus
    return round(min(strength, 1.0), 4)


def detect_causal(
    events: Sequence[ActivityEvent],
    threshold: float,
    config: DetectionConfig,
) -> list[Relation]:
    ordered = sort_by_timestamp(events)
    relations: list[Relation] = []

    for current, nxt in zip(ordered, ordered[1:]):
        if current.activity_type != nxt.activity_type and current.source != nxt.source:
            continue
        strength = causal_strength(nxt.timestamp - current.timestamp, config)
        if strength < threshold:
            continue
        relations.append(
            Relation(
                relation_type=RelationType.CAUSAL,
                related_event_ids=[current.id, nxt.id],
                strength=strength,
                description=f"Possible causal relation between sequential {current.activity_type} events",
                tags=["auto-detected", "potential-causal"],
            )
        )

    logger.debug("Causal pass: %d relations from %d events", len(relations), len(ordered))
    return relations
