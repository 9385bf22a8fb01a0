"""Pydantic schemas for the correlation API routes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from eemflow.core.models import Relation

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DetectCorrelationsRequest(BaseModel):
    """Trigger a correlation run for one session."""

    session_id: str = Field(min_length=1)
    strategies: str | list[str] = "all"
    min_strength: float | None = None
    max_events: int | None = Field(default=None, gt=0)


class ManualCorrelationRequest(BaseModel):
    event_ids: list[str] = Field(min_length=2)
    relation_type: str = Field(min_length=1)
    description: str = ""
    strength: float = 1.0
    tags: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RelationResponse(BaseModel):
    id: str
    timestamp: datetime
    relation_type: str
    related_event_ids: list[str]
    strength: float
    description: str
    tags: list[str]
    session_id: str

    @classmethod
    def from_relation(cls, relation: Relation) -> RelationResponse:
        return cls.model_validate(relation.to_dict())


class RelationListResponse(BaseModel):
    items: list[RelationResponse]
    total: int


class DetectCorrelationsResponse(BaseModel):
    """Summary of a completed correlation run."""

    session_id: str
    total: int
    counts_by_type: dict[str, int]
    items: list[RelationResponse]
