"""Tests for JSON, DOT and Mermaid export."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from eemflow.core.errors import InvalidArgumentError, UnsupportedFormatError
from eemflow.core.models import FlowEdge, FlowGraph, FlowNode
from eemflow.flow.exporter import ExportFormat, export_graph, mermaid_class_name, to_dot, to_mermaid

CREATED = datetime(2026, 1, 15, 11, 30, 15, 123456, tzinfo=UTC)


@pytest.fixture
def graph() -> FlowGraph:
    edit = FlowNode(
        event_id="e1",
        node_type="code_edit",
        label='Edit: rename "tokens"',
        metadata={"timestamp": "2026-01-15T10:00:00+00:00", "source": "vscode"},
        id="n1",
    )
    search = FlowNode(event_id="e2", node_type="search", label="Search: docs", id="n2")
    meeting = FlowNode(event_id="e3", node_type="meeting", label="meeting: sync", id="n3")
    return FlowGraph(
        id="flow-1",
        name="Morning",
        summary="Flow of 3 activities",
        categories=["work"],
        created_at=CREATED,
        nodes=[edit, search, meeting],
        edges=[
            FlowEdge(source_node_id="n1", target_node_id="n2", relation_type="causal", weight=0.9, id="x1"),
            FlowEdge(source_node_id="n2", target_node_id="n3", relation_type="temporal", weight=0.4, id="x2"),
            FlowEdge(source_node_id="n1", target_node_id="n3", relation_type="semantic", weight=0.5, id="x3"),
            FlowEdge(source_node_id="n3", target_node_id="n1", relation_type="temporal_sequence", id="x4"),
        ],
    )


class TestJsonExport:
    def test_round_trip(self, graph: FlowGraph) -> None:
        text = export_graph(graph, "json")
        assert FlowGraph.from_dict(json.loads(text)) == graph

    def test_round_trip_drops_edges_to_unknown_nodes(self, graph: FlowGraph) -> None:
        graph.edges.append(FlowEdge(source_node_id="n1", target_node_id="ghost", relation_type="causal", id="x5"))
        data = json.loads(export_graph(graph, "json"))
        restored = FlowGraph.from_dict(data)
        assert len(data["edges"]) == 4
        assert len(restored.edges) == len(data["edges"])
        assert len(restored.nodes) == len(data["nodes"])
        assert "ghost" not in json.dumps(data)

    def test_wire_names(self, graph: FlowGraph) -> None:
        data = json.loads(export_graph(graph, ExportFormat.JSON))
        assert set(data) == {"id", "name", "created_at", "summary", "categories", "nodes", "edges"}
        assert set(data["nodes"][0]) == {"id", "event_id", "node_type", "label", "metadata"}
        assert set(data["edges"][0]) == {"id", "source_node_id", "target_node_id", "relation_type", "weight"}

    def test_indented(self, graph: FlowGraph) -> None:
        assert '\n  "id": "flow-1"' in export_graph(graph, "json")

    def test_empty_graph(self) -> None:
        data = json.loads(export_graph(FlowGraph(name="nothing"), "json"))
        assert data["nodes"] == []
        assert data["edges"] == []


class TestDotExport:
    def test_header_and_footer(self, graph: FlowGraph) -> None:
        text = to_dot(graph)
        assert text.startswith('digraph "Morning" {')
        assert text.rstrip().endswith("}")

    def test_nodes_coloured_by_type(self, graph: FlowGraph) -> None:
        text = to_dot(graph)
        assert '"n1" [label="Edit: rename \\"tokens\\"", fillcolor=lightgreen];' in text
        assert '"n2" [label="Search: docs", fillcolor=lightcyan];' in text
        assert '"n3" [label="meeting: sync", fillcolor=lightblue];' in text

    def test_edges_styled_by_relation(self, graph: FlowGraph) -> None:
        text = to_dot(graph)
        assert '"n1" -> "n2" [label="causal (0.90)", style=solid];' in text
        assert '"n2" -> "n3" [label="temporal (0.40)", style=dashed];' in text
        assert '"n1" -> "n3" [label="semantic (0.50)", style=dotted];' in text
        assert '"n3" -> "n1" [label="temporal_sequence (1.00)", style=solid];' in text

    def test_edges_to_unknown_nodes_not_rendered(self, graph: FlowGraph) -> None:
        graph.edges.append(FlowEdge(source_node_id="ghost", target_node_id="n2", relation_type="causal"))
        text = to_dot(graph)
        assert "ghost" not in text
        assert text.count(" -> ") == 4

    def test_unnamed_graph_uses_id(self) -> None:
        assert to_dot(FlowGraph(id="abc")).startswith('digraph "abc" {')


class TestMermaidExport:
    def test_fenced_block(self, graph: FlowGraph) -> None:
        lines = to_mermaid(graph).rstrip("\n").split("\n")
        assert lines[:2] == ["```mermaid", "graph LR"]
        assert lines[-1] == "```"

    def test_nodes_and_classes(self, graph: FlowGraph) -> None:
        text = to_mermaid(graph)
        assert 'n1["Edit: rename #quot;tokens#quot;"]:::typeCodeEdit' in text
        assert 'n2["Search: docs"]:::typeSearch' in text
        assert "classDef typeCodeEdit fill:#d4ffdd,stroke:#28a745,color:#333" in text
        assert "classDef typeMeeting fill:#f9f9f9,stroke:#999999,color:#333" in text

    def test_arrows(self, graph: FlowGraph) -> None:
        text = to_mermaid(graph)
        assert 'n1 ==>|"causal"| n2' in text
        assert 'n2 -.->|"temporal"| n3' in text
        assert 'n1 -->|"semantic"| n3' in text
        assert 'n3 -->|"temporal_sequence"| n1' in text

    def test_edges_to_unknown_nodes_not_rendered(self, graph: FlowGraph) -> None:
        graph.edges.append(FlowEdge(source_node_id="n2", target_node_id="ghost", relation_type="temporal"))
        assert "ghost" not in to_mermaid(graph)

    @pytest.mark.parametrize(
        ("node_type", "expected"),
        [("code_edit", "typeCodeEdit"), ("search", "typeSearch"), ("web-search v2", "typeWebSearchV2")],
    )
    def test_class_names(self, node_type: str, expected: str) -> None:
        assert mermaid_class_name(node_type) == expected


class TestExportGraph:
    @pytest.mark.parametrize("fmt", ["JSON", " dot ", ExportFormat.MERMAID])
    def test_format_names_normalized(self, graph: FlowGraph, fmt) -> None:
        assert export_graph(graph, fmt)

    def test_unsupported(self, graph: FlowGraph) -> None:
        with pytest.raises(UnsupportedFormatError, match="xml"):
            export_graph(graph, "xml")

    def test_unsupported_is_invalid_argument(self, graph: FlowGraph) -> None:
        with pytest.raises(InvalidArgumentError):
            export_graph(graph, "png")

    def test_export_does_not_modify_graph(self, graph: FlowGraph) -> None:
        before = graph.to_dict()
        for fmt in ExportFormat:
            export_graph(graph, fmt)
        assert graph.to_dict() == before
