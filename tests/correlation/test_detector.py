"""Tests for the correlation detector entry point."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import pytest

from eemflow.core.errors import InvalidArgumentError
from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.detector import (
    clamp_strength,
    detect_correlations,
    normalize_strategies,
    validate_threshold,
)

BASE_TS = datetime(2026, 1, 15, 10, 0, tzinfo=UTC)


def _events() -> list[ActivityEvent]:
    """A small mixed session: same-file edits, a search, and similar notes."""
    return [
        ActivityEvent(
            id="e1",
            timestamp=BASE_TS,
            activity_type="code_edit",
            content="refactor parser module tokens",
            source="vscode",
            metadata={"file": "parser.py"},
        ),
        ActivityEvent(
            id="e2",
            timestamp=BASE_TS + timedelta(seconds=20),
            activity_type="code_edit",
            content="refactor parser module errors",
            source="vscode",
            metadata={"file": "parser.py"},
        ),
        ActivityEvent(
            id="e3",
            timestamp=BASE_TS + timedelta(minutes=2),
            activity_type="search",
            content="python tokenizer docs",
            source="browser",
        ),
    ]


def _signature(relations: list[Relation]) -> list[tuple[str, tuple[str, ...], float]]:
    return [(str(r.relation_type), tuple(r.related_event_ids), r.strength) for r in relations]


class TestNormalizeStrategies:
    @pytest.mark.parametrize("value", [None, "all", "", "ALL", [], ["temporal", "all"]])
    def test_all(self, value) -> None:
        assert normalize_strategies(value) == tuple(RelationType)

    def test_comma_string_keeps_canonical_order(self) -> None:
        assert normalize_strategies("semantic, Temporal") == (RelationType.TEMPORAL, RelationType.SEMANTIC)

    def test_iterable(self) -> None:
        assert normalize_strategies(["contextual"]) == (RelationType.CONTEXTUAL,)

    def test_unknown(self) -> None:
        with pytest.raises(InvalidArgumentError, match="magic"):
            normalize_strategies("temporal,magic")


class TestValidateThreshold:
    def test_default(self) -> None:
        assert validate_threshold(None) == 0.5

    @pytest.mark.parametrize("value", [0.0, 0.25, 1.0])
    def test_in_range(self, value: float) -> None:
        assert validate_threshold(value) == value

    @pytest.mark.parametrize("value", [-0.1, 1.01, math.nan])
    def test_out_of_range(self, value: float) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_threshold(value)


class TestClampStrength:
    @pytest.mark.parametrize(("value", "expected"), [(-1.0, 0.0), (0.3, 0.3), (7.0, 1.0), (math.nan, 0.5)])
    def test_clamp(self, value: float, expected: float) -> None:
        assert clamp_strength(value) == expected


class TestDetectCorrelations:
    def test_empty_input(self) -> None:
        assert detect_correlations([]) == []

    def test_invalid_threshold_rejected_even_for_empty_input(self) -> None:
        with pytest.raises(InvalidArgumentError):
            detect_correlations([], min_strength=2.0)

    def test_unknown_strategy_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            detect_correlations(_events(), strategies="psychic")

    def test_all_strategies(self) -> None:
        relations = detect_correlations(_events())
        kinds = {r.kind for r in relations}
        assert kinds == {RelationType.CAUSAL, RelationType.SEMANTIC, RelationType.CONTEXTUAL}

    def test_strategy_subset(self) -> None:
        relations = detect_correlations(_events(), strategies="causal")
        assert {r.kind for r in relations} == {RelationType.CAUSAL}
        assert relations[0].related_event_ids == ["e1", "e2"]

    def test_grouped_by_strategy_order(self) -> None:
        relations = detect_correlations(_events(), min_strength=0.0)
        order = [list(RelationType).index(r.kind) for r in relations]
        assert order == sorted(order)

    def test_strength_bounds_and_threshold(self) -> None:
        for threshold in (0.0, 0.3, 0.5, 0.8, 1.0):
            for relation in detect_correlations(_events(), min_strength=threshold):
                assert threshold <= relation.strength <= 1.0

    def test_idempotent(self) -> None:
        events = _events()
        assert _signature(detect_correlations(events)) == _signature(detect_correlations(events))

    def test_fresh_ids_each_run(self) -> None:
        events = _events()
        first = {r.id for r in detect_correlations(events)}
        second = {r.id for r in detect_correlations(events)}
        assert first.isdisjoint(second)

    def test_events_not_mutated(self) -> None:
        events = _events()
        snapshot = [e.to_dict() for e in events]
        detect_correlations(list(reversed(events)))
        assert [e.to_dict() for e in events] == snapshot
