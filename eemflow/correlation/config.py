"""Tunable constants for the correlation strategies.

The values below are heuristic; they define
the accept/reject boundary at the default 0.5 threshold and should only be
overridden deliberately, per call, through ``DetectionConfig``.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MIN_STRENGTH = 0.5

# Temporal: runs of events within 5 minutes of an anchor, strength = len/10
TEMPORAL_WINDOW = timedelta(minutes=5)
TEMPORAL_RUN_SCALE = 10.0
TEMPORAL_SKIP_DIVISOR = 2

# Causal: adjacent same-type/same-source pairs
CAUSAL_BASE_STRENGTH = 0.6
CAUSAL_CLOSE_GAP = timedelta(seconds=30)
CAUSAL_CLOSE_BONUS = 0.3
CAUSAL_NEAR_GAP = timedelta(minutes=5)
CAUSAL_NEAR_BONUS = 0.1

# Semantic: Jaccard over content tokens
SEMANTIC_MIN_TOKEN_LENGTH = 3
STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "if", "then", "else", "when",
        "at", "from", "by", "with", "about", "against", "between", "into",
        "through", "during", "before", "after", "above", "below", "to", "of",
        "in", "on", "uma", "um", "o", "os", "as", "de", "da", "do",
        "que", "e", "é", "para", "com", "por", "em", "no", "na",
    }
)  # fmt: skip

# Contextual: shared metadata keys, strength = min(1, base + size/scale)
CONTEXTUAL_FILE_KEYS: tuple[str, ...] = ("file", "filepath", "fileName")
CONTEXTUAL_FILE_BASE = 0.7
CONTEXTUAL_FILE_SCALE = 20.0
CONTEXTUAL_KEYS: tuple[str, ...] = ("project", "namespace", "class", "method")
CONTEXTUAL_BASE = 0.6
CONTEXTUAL_SCALE = 30.0


class DetectionConfig(BaseModel):
    """Explicit per-call configuration for ``detect_correlations``."""

    model_config = ConfigDict(frozen=True)

    temporal_window: timedelta = TEMPORAL_WINDOW
    temporal_run_scale: float = Field(default=TEMPORAL_RUN_SCALE, gt=0)
    temporal_skip_divisor: int = Field(default=TEMPORAL_SKIP_DIVISOR, ge=1)

    causal_base_strength: float = Field(default=CAUSAL_BASE_STRENGTH, ge=0.0, le=1.0)
    causal_close_gap: timedelta = CAUSAL_CLOSE_GAP
    causal_close_bonus: float = Field(default=CAUSAL_CLOSE_BONUS, ge=0.0)
    causal_near_gap: timedelta = CAUSAL_NEAR_GAP
    causal_near_bonus: float = Field(default=CAUSAL_NEAR_BONUS, ge=0.0)

    semantic_min_token_length: int = Field(default=SEMANTIC_MIN_TOKEN_LENGTH, ge=1)
    stop_words: frozenset[str] = STOP_WORDS

    contextual_file_keys: tuple[str, ...] = CONTEXTUAL_FILE_KEYS
    contextual_file_base: float = Field(default=CONTEXTUAL_FILE_BASE, ge=0.0)
    contextual_file_scale: float = Field(default=CONTEXTUAL_FILE_SCALE, gt=0)
    contextual_keys: tuple[str, ...] = CONTEXTUAL_KEYS
    contextual_base: float = Field(default=CONTEXTUAL_BASE, ge=0.0)
    contextual_scale: float = Field(default=CONTEXTUAL_SCALE, gt=0)
