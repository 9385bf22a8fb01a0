"""Manually declared correlations and relation lookup helpers."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from eemflow.core.errors import InvalidArgumentError
from eemflow.core.models import Relation

logger = logging.getLogger(__name__)


def parse_id_list(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated id string (or iterable) into trimmed, non-blank ids."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    return [p.strip() for p in parts if p and p.strip()]


def create_manual_relation(
    event_ids: str | Iterable[str],
    relation_type: str,
    description: str = "",
    strength: float = 1.0,
    tags: str | Iterable[str] | None = None,
    session_id: str = "",
) -> Relation:
    """Build a caller-declared relation.

    Args:
        event_ids: At least two event ids, as a list or comma-separated string.
        relation_type: Any non-empty type; detected kinds are allowed too.
        description: Free-text explanation.
        strength: Evidence strength in [0, 1].
        tags: Optional tags, list or comma-separated string.
        session_id: Optional session the relation belongs to.

    Raises:
        InvalidArgumentError: On fewer than two ids, a blank type, or a strength outside [0, 1].
    """
    ids = parse_id_list(event_ids)
    if len(ids) < 2:
        raise InvalidArgumentError("At least two activity IDs are required to create a correlation")
    if not relation_type or not relation_type.strip():
        raise InvalidArgumentError("Correlation type must not be empty")
    if math.isnan(strength) or not 0.0 <= strength <= 1.0:
        raise InvalidArgumentError(f"Correlation strength must be between 0.0 and 1.0, got {strength}")

    relation = Relation(
        relation_type=relation_type.strip(),
        related_event_ids=ids,
        strength=strength,
        description=description,
        tags=parse_id_list(tags),
        session_id=session_id,
    )
    logger.info("Manual correlation created: %s, type=%s, events=%d", relation.id, relation.relation_type, len(ids))
    return relation


def filter_relations(relations: Sequence[Relation], relation_types: str | Iterable[str] | None) -> list[Relation]:
    """Keep relations whose type matches one of ``relation_types`` (case-insensitive).

    ``None``, an empty selection, or ``"all"`` keeps everything.
    """
    wanted = {t.lower() for t in parse_id_list(relation_types)}
    if not wanted or "all" in wanted:
        return list(relations)
    return [r for r in relations if str(r.relation_type).lower() in wanted]
