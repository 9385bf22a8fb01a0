"""Contextual correlation: events sharing a file, project, namespace, class or method."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.config import DetectionConfig

logger = logging.getLogger(__name__)


def file_of(event: ActivityEvent, file_keys: Iterable[str]) -> str | None:
    """Resolve the file an event refers to, trying metadata keys in order."""
    for key in file_keys:
        value = event.metadata.get(key)
        if value is not None and str(value):
            return str(value)
    return event.associated_file or None


def _group(events: Sequence[ActivityEvent], key_of) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for event in events:
        key = key_of(event)
        if key is None:
            continue
        groups.setdefault(key, []).append(event.id)
    return {k: ids for k, ids in groups.items() if len(ids) > 1}


def _metadata_value(key: str):
    def key_of(event: ActivityEvent) -> str | None:
        value = event.metadata.get(key)
        return None if value is None else str(value)

    return key_of


def group_strength(size: int, base: float, scale: float) -> float:
    return round(min(1.0, base + size / scale), 4)


def detect_contextual(
    events: Sequence[ActivityEvent],
    threshold: float,
    config: DetectionConfig,
) -> list[Relation]:
    """Emit one relation per group of two or more events sharing a context key.

    Files are grouped first (``file``/``filepath``/``fileName`` metadata, then
    ``associated_file``), then each of the generic keys. Events lacking a key
    are skipped for that key.
    """
    relations: list[Relation] = []

    by_file = _group(events, lambda e: file_of(e, config.contextual_file_keys))
    for path, ids in by_file.items():
        strength = group_strength(len(ids), config.contextual_file_base, config.contextual_file_scale)
        if strength >= threshold:
            relations.append(
                Relation(
                    relation_type=RelationType.CONTEXTUAL,
                    related_event_ids=ids,
                    strength=strength,
                    description=f"Events related to the same file: {path}",
                    tags=["auto-detected", "same-file"],
                )
            )

    for key in config.contextual_keys:
        for value, ids in _group(events, _metadata_value(key)).items():
            strength = group_strength(len(ids), config.contextual_base, config.contextual_scale)
            if strength < threshold:
                continue
            relations.append(
                Relation(
                    relation_type=RelationType.CONTEXTUAL,
                    related_event_ids=ids,
                    strength=strength,
                    description=f"Events related to the same {key}: {value}",
                    tags=["auto-detected", f"same-{key}"],
                )
            )

    logger.debug("Contextual pass: %d relations from %d events", len(relations), len(events))
    return relations
