"""Semantic correlation: pairwise Jaccard similarity of event content.

Compares every pair of events, so cost is quadratic in the number of
events; callers bound the input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from eemflow.core.models import ActivityEvent, Relation, RelationType
from eemflow.correlation.config import DetectionConfig
from eemflow.correlation.text import jaccard, tokenize

logger = logging.getLogger(__name__)


def detect_semantic(
    events: Sequence[ActivityEvent],
    threshold: float,
    config: DetectionConfig,
) -> list[Relation]:
    token_sets = [tokenize(e.content, config.semantic_min_token_length, config.stop_words) for e in events]
    relations: list[Relation] = []

    for i in range(len(events)):
        if not token_sets[i]:
            continue
        for j in range(i + 1, len(events)):
            similarity = jaccard(token_sets[i], token_sets[j])
            # Empty content never correlates, even at a zero threshold.
            if similarity <= 0.0 or similarity < threshold:
                continue
            shared = len(token_sets[i] & token_sets[j])
            relations.append(
                Relation(
                    relation_type=RelationType.SEMANTIC,
                    related_event_ids=[events[i].id, events[j].id],
                    strength=similarity,
                    description=f"Similar content ({shared} shared terms, {similarity:.0%} match)",
                    tags=["auto-detected", "content-similarity"],
                )
            )

    logger.debug("Semantic pass: %d relations from %d events", len(relations), len(events))
    return relations
