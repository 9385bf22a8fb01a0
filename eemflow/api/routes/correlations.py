"""Correlation API routes.

Provides endpoints to run correlation detection for a session, declare
manual correlations, and look up the correlations of given events.
"""

from __future__ import annotations

import logging
from collections import Counter

from fastapi import APIRouter, Depends, Query, status

from eemflow.api.deps import get_flow_service
from eemflow.api.schemas.correlations import (
    DetectCorrelationsRequest,
    DetectCorrelationsResponse,
    ManualCorrelationRequest,
    RelationListResponse,
    RelationResponse,
)
from eemflow.services.flows import FlowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/correlations", tags=["correlations"])


# ---------------------------------------------------------------------------
# POST /correlations/detect
# ---------------------------------------------------------------------------


@router.post("/detect", response_model=DetectCorrelationsResponse)
async def detect_correlations(
    body: DetectCorrelationsRequest,
    service: FlowService = Depends(get_flow_service),
) -> DetectCorrelationsResponse:
    """Detect and store correlations among a session's recent activities."""
    relations = await service.detect_for_session(
        body.session_id,
        strategies=body.strategies,
        min_strength=body.min_strength,
        max_events=body.max_events,
    )
    counts = Counter(str(r.relation_type) for r in relations)
    return DetectCorrelationsResponse(
        session_id=body.session_id,
        total=len(relations),
        counts_by_type=dict(counts),
        items=[RelationResponse.from_relation(r) for r in relations],
    )


# ---------------------------------------------------------------------------
# POST /correlations/manual
# ---------------------------------------------------------------------------


@router.post("/manual", response_model=RelationResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_correlation(
    body: ManualCorrelationRequest,
    service: FlowService = Depends(get_flow_service),
) -> RelationResponse:
    relation = await service.add_manual_correlation(
        body.event_ids,
        body.relation_type,
        description=body.description,
        strength=body.strength,
        tags=body.tags,
    )
    return RelationResponse.from_relation(relation)


# ---------------------------------------------------------------------------
# GET /correlations
# ---------------------------------------------------------------------------


@router.get("", response_model=RelationListResponse)
async def list_correlations(
    event_ids: str = Query(..., description="Comma-separated activity event IDs"),
    relation_type: str | None = Query(default=None, description="Comma-separated relation types"),
    service: FlowService = Depends(get_flow_service),
) -> RelationListResponse:
    relations = await service.get_correlations(event_ids, relation_type)
    return RelationListResponse(
        items=[RelationResponse.from_relation(r) for r in relations],
        total=len(relations),
    )
