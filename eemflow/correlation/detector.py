"""Correlation detector: runs the selected strategies and unions their output.

Each strategy is independent and pure; the detector only validates
arguments, dispatches, and concatenates results in a fixed strategy order
(temporal, causal, semantic, contextual) so repeated runs over the same
input yield the same relations.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Sequence

from eemflow.core.errors import InvalidArgumentError
from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.causal import detect_causal
from eemflow.correlation.config import DEFAULT_MIN_STRENGTH, DetectionConfig
from eemflow.correlation.contextual import detect_contextual
from eemflow.correlation.semantic import detect_semantic
from eemflow.correlation.temporal import detect_temporal

logger = logging.getLogger(__name__)

ALL_STRATEGIES = "all"

StrategyFn = Callable[[Sequence[ActivityEvent], float, DetectionConfig], list[Relation]]

STRATEGIES: dict[RelationType, StrategyFn] = {
    RelationType.TEMPORAL: detect_temporal,
    RelationType.CAUSAL: detect_causal,
    RelationType.SEMANTIC: detect_semantic,
    RelationType.CONTEXTUAL: detect_contextual,
}


def normalize_strategies(strategies: str | Iterable[str] | None) -> tuple[RelationType, ...]:
    """Resolve a strategy selection into an ordered tuple of strategies.

    Accepts ``"all"``, a single name, a comma-separated string, or an
    iterable of names (case-insensitive). ``None`` or an empty selection
    means all strategies.

    Raises:
        InvalidArgumentError: If any name is not a known strategy.
    """
    if strategies is None:
        return tuple(STRATEGIES)
    raw = strategies.split(",") if isinstance(strategies, str) else list(strategies)
    names = [str(name).strip().lower() for name in raw if str(name).strip()]
    if not names or ALL_STRATEGIES in names:
        return tuple(STRATEGIES)

    selected: set[RelationType] = set()
    for name in names:
        try:
            selected.add(RelationType(name))
        except ValueError as err:
            valid = ", ".join([*STRATEGIES, ALL_STRATEGIES])
            raise InvalidArgumentError(f"Unknown correlation strategy {name!r}; expected one of {valid}") from err
    return tuple(s for s in STRATEGIES if s in selected)


def validate_threshold(min_strength: float | None) -> float:
    """Return the threshold, defaulting to 0.5.

    Raises:
        InvalidArgumentError: If the value lies outside [0, 1].
    """
    if min_strength is None:
        return DEFAULT_MIN_STRENGTH
    value = float(min_strength)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise InvalidArgumentError(f"Correlation threshold must be between 0.0 and 1.0, got {min_strength}")
    return value


def clamp_strength(value: float) -> float:
    """Clamp a caller-supplied strength or threshold into [0, 1]."""
    if math.isnan(value):
        return DEFAULT_MIN_STRENGTH
    return min(max(value, 0.0), 1.0)


def detect_correlations(
    events: Sequence[ActivityEvent],
    strategies: str | Iterable[str] | None = ALL_STRATEGIES,
    min_strength: float | None = DEFAULT_MIN_STRENGTH,
    config: DetectionConfig | None = None,
) -> list[Relation]:
    """Discover relations between activity events.

    Args:
        events: Events to correlate, in any order. May be empty.
        strategies: Strategy selection, see :func:`normalize_strategies`.
        min_strength: Minimum strength for a relation to be emitted.
        config: Detection constants; defaults when omitted.

    Returns:
        Relations from every selected strategy, grouped by strategy.

    Raises:
        InvalidArgumentError: For an out-of-range threshold or unknown strategy.
    """
    threshold = validate_threshold(min_strength)
    selected = normalize_strategies(strategies)
    cfg = config or DetectionConfig()

    if not events:
        return []

    relations: list[Relation] = []
    for strategy in selected:
        found = STRATEGIES[strategy](events, threshold, cfg)
        relations.extend(found)

    logger.info(
        "Detected %d correlations across %d events (strategies=%s, threshold=%.2f)",
        len(relations),
        len(events),
        ",".join(selected),
        threshold,
    )
    return relations
