"""Flow API routes.

Generate flows for a session, fetch and list stored flows, analyze their
structure, and export them as JSON, DOT or Mermaid text.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from eemflow.api.deps import get_flow_service
from eemflow.api.schemas.flows import FlowAnalysisResponse, FlowResponse, GenerateFlowRequest
from eemflow.flow.exporter import ExportFormat
from eemflow.services.flows import FlowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/flows", tags=["flows"])

EXPORT_MEDIA_TYPES: dict[str, str] = {
    ExportFormat.JSON.value: "application/json",
    ExportFormat.DOT.value: "text/vnd.graphviz",
    ExportFormat.MERMAID.value: "text/plain",
}


@router.post("", response_model=FlowResponse, status_code=status.HTTP_201_CREATED)
async def generate_flow(
    body: GenerateFlowRequest,
    service: FlowService = Depends(get_flow_service),
) -> FlowResponse:
    """Build and store a flow from a session's activities in a time window."""
    flow = await service.generate_flow(
        body.session_id,
        body.name,
        window_minutes=body.window_minutes,
        categories=body.categories,
    )
    return FlowResponse.from_graph(flow)


@router.get("", response_model=list[FlowResponse])
async def list_flows(
    start: datetime = Query(..., description="ISO 8601 start of the range"),
    end: datetime = Query(..., description="ISO 8601 end of the range"),
    max_flows: int = Query(default=100, gt=0, le=1000),
    service: FlowService = Depends(get_flow_service),
) -> list[FlowResponse]:
    flows = await service.list_flows(start, end, max_flows)
    return [FlowResponse.from_graph(f) for f in flows]


@router.get("/{flow_id}", response_model=FlowResponse)
async def get_flow(
    flow_id: str,
    service: FlowService = Depends(get_flow_service),
) -> FlowResponse:
    flow = await service.get_flow(flow_id)
    if flow is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flow not found")
    return FlowResponse.from_graph(flow)


@router.get("/{flow_id}/analysis", response_model=FlowAnalysisResponse)
async def analyze_flow(
    flow_id: str,
    service: FlowService = Depends(get_flow_service),
) -> FlowAnalysisResponse:
    """Structural metrics of a flow; unknown ids report an empty graph."""
    analysis = await service.analyze_flow(flow_id)
    return FlowAnalysisResponse.from_analysis(flow_id, analysis)


@router.get("/{flow_id}/export", response_class=PlainTextResponse)
async def export_flow(
    flow_id: str,
    format: str = Query(default="json", description="json, dot or mermaid"),
    service: FlowService = Depends(get_flow_service),
) -> PlainTextResponse:
    """Return the exported text verbatim."""
    text = await service.export_flow(flow_id, format)
    media_type = EXPORT_MEDIA_TYPES.get(format.strip().lower(), "text/plain")
    return PlainTextResponse(content=text, media_type=media_type)
