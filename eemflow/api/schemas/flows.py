"""Pydantic schemas for the flow API routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from eemflow.core.models import FlowGraph
from eemflow.flow.analyzer import GraphAnalysis


class GenerateFlowRequest(BaseModel):
    session_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    window_minutes: int | None = Field(default=None, gt=0)
    categories: list[str] = Field(default_factory=list)


class FlowNodeResponse(BaseModel):
    id: str
    event_id: str
    node_type: str
    label: str
    metadata: dict[str, Any]


class FlowEdgeResponse(BaseModel):
    id: str
    source_node_id: str
    target_node_id: str
    relation_type: str
    weight: float


class FlowResponse(BaseModel):
    id: str
    name: str
    created_at: datetime
    summary: str
    categories: list[str]
    nodes: list[FlowNodeResponse]
    edges: list[FlowEdgeResponse]

    @classmethod
    def from_graph(cls, graph: FlowGraph) -> FlowResponse:
        return cls.model_validate(graph.to_dict())


class FlowAnalysisResponse(BaseModel):
    flow_id: str
    node_count: int
    edge_count: int
    has_eulerian_circuit: bool
    has_eulerian_path: bool
    odd_degree_nodes: list[str]
    connected_components: int
    density: float

    @classmethod
    def from_analysis(cls, flow_id: str, analysis: GraphAnalysis) -> FlowAnalysisResponse:
        return cls(
            flow_id=flow_id,
            node_count=analysis.node_count,
            edge_count=analysis.edge_count,
            has_eulerian_circuit=analysis.has_eulerian_circuit,
            has_eulerian_path=analysis.has_eulerian_path,
            odd_degree_nodes=list(analysis.odd_degree_nodes),
            connected_components=analysis.connected_components,
            density=analysis.density,
        )
