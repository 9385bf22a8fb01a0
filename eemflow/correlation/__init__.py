"""Correlation Detector: discovers relations between activity events.

Four independent strategies are available and their outputs are unioned:

1. Temporal: runs of events clustered within a time window.
2. Causal: adjacent events sharing an activity type or source.
3. Semantic: pairwise Jaccard similarity of content tokens.
4. Contextual: groups of events sharing file/project/namespace/class/method.

Manual relations can be declared alongside the detected ones.
"""

from eemflow.correlation.config import DEFAULT_MIN_STRENGTH, DetectionConfig
from eemflow.correlation.detector import (
    ALL_STRATEGIES,
    clamp_strength,
    detect_correlations,
    normalize_strategies,
    validate_threshold,
)
from eemflow.correlation.manual import create_manual_relation, filter_relations, parse_id_list
from eemflow.correlation.text import semantic_similarity, tokenize

__all__ = [
    "ALL_STRATEGIES",
    "DEFAULT_MIN_STRENGTH",
    "DetectionConfig",
    "clamp_strength",
    "create_manual_relation",
    "detect_correlations",
    "filter_relations",
    "normalize_strategies",
    "parse_id_list",
    "semantic_similarity",
    "tokenize",
    "validate_threshold",
]
