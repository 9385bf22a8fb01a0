"""Textual export of flow graphs: JSON, Graphviz DOT and Mermaid.

These three formats are the engine's only wire formats; transport layers
forward the chosen format name and return the text verbatim.
"""

from __future__ import annotations

import enum
import json
import re

from eemflow.core.errors import UnsupportedFormatError
from eemflow.core.models import FlowGraph


class ExportFormat(enum.StrEnum):
    JSON = "json"
    DOT = "dot"
    MERMAID = "mermaid"


# node type -> Graphviz fill colour
DOT_NODE_COLORS: dict[str, str] = {
    "edit": "lightgreen",
    "coding": "lightgreen",
    "code_edit": "lightgreen",
    "navigation": "lightyellow",
    "search": "lightcyan",
    "execution": "lightcoral",
}
DOT_DEFAULT_COLOR = "lightblue"

# relation type -> Graphviz edge style
DOT_EDGE_STYLES: dict[str, str] = {
    "temporal": "dashed",
    "causal": "solid",
    "semantic": "dotted",
}
DOT_DEFAULT_STYLE = "solid"

# node type -> (fill, stroke) for Mermaid class definitions
MERMAID_NODE_STYLES: dict[str, tuple[str, str]] = {
    "edit": ("#d4ffdd", "#28a745"),
    "coding": ("#d4ffdd", "#28a745"),
    "code_edit": ("#d4ffdd", "#28a745"),
    "navigation": ("#ffffd4", "#ffc107"),
    "search": ("#d4f4ff", "#17a2b8"),
    "execution": ("#ffd4d4", "#dc3545"),
}
MERMAID_DEFAULT_STYLE = ("#f9f9f9", "#999999")

# relation type -> Mermaid arrow
MERMAID_ARROWS: dict[str, str] = {
    "temporal": "-.->",
    "causal": "==>",
    "semantic": "-->",
}
MERMAID_DEFAULT_ARROW = "-->"


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


def _mermaid_escape(text: str) -> str:
    return text.replace('"', "#quot;").replace("\n", " ")


def mermaid_class_name(node_type: str) -> str:
    """``code_edit`` -> ``typeCodeEdit``; unusable characters are dropped."""
    parts = [p for p in re.split(r"[^0-9A-Za-z]+", node_type) if p]
    return "type" + "".join(p[:1].upper() + p[1:] for p in parts)


def to_json(graph: FlowGraph) -> str:
    return json.dumps(graph.to_dict(), indent=2, ensure_ascii=False)


def to_dot(graph: FlowGraph) -> str:
    title = _dot_escape(graph.name or graph.id)
    lines = [
        f'digraph "{title}" {{',
        '  graph [rankdir=LR, fontname="Arial", labelloc="t"];',
        '  node [shape=box, style=filled, fillcolor=lightblue, fontname="Arial"];',
        '  edge [fontname="Arial"];',
    ]
    if graph.summary:
        lines.append(f'  label="{title} - {_dot_escape(graph.summary)}";')
    lines.append("")

    lines.append("  // Nodes")
    for node in graph.nodes:
        color = DOT_NODE_COLORS.get(node.node_type.lower(), DOT_DEFAULT_COLOR)
        lines.append(f'  "{node.id}" [label="{_dot_escape(node.label)}", fillcolor={color}];')
    lines.append("")

    lines.append("  // Edges")
    for edge in graph.valid_edges():
        relation = str(edge.relation_type)
        style = DOT_EDGE_STYLES.get(relation.lower(), DOT_DEFAULT_STYLE)
        label = f"{_dot_escape(relation)} ({edge.weight:.2f})"
        lines.append(f'  "{edge.source_node_id}" -> "{edge.target_node_id}" [label="{label}", style={style}];')
    lines.append("}")
    return "\n".join(lines) + "\n"


def to_mermaid(graph: FlowGraph) -> str:
    lines = ["```mermaid", "graph LR"]
    header = " - ".join(part for part in (graph.name, graph.summary) if part)
    if header:
        lines.append(f"    %% {header}")
    lines.append("")

    lines.append("    %% Nodes")
    node_types: dict[str, str] = {}
    for node in graph.nodes:
        class_name = mermaid_class_name(node.node_type)
        node_types.setdefault(class_name, node.node_type)
        lines.append(f'    {node.id}["{_mermaid_escape(node.label)}"]:::{class_name}')
    lines.append("")

    lines.append("    %% Edges")
    for edge in graph.valid_edges():
        relation = str(edge.relation_type)
        arrow = MERMAID_ARROWS.get(relation.lower(), MERMAID_DEFAULT_ARROW)
        lines.append(f'    {edge.source_node_id} {arrow}|"{_mermaid_escape(relation)}"| {edge.target_node_id}')

    if node_types:
        lines.append("")
        lines.append("    %% Class definitions")
        for class_name, node_type in node_types.items():
            fill, stroke = MERMAID_NODE_STYLES.get(node_type.lower(), MERMAID_DEFAULT_STYLE)
            lines.append(f"    classDef {class_name} fill:{fill},stroke:{stroke},color:#333")
    lines.append("```")
    return "\n".join(lines) + "\n"


_EXPORTERS = {
    ExportFormat.JSON: to_json,
    ExportFormat.DOT: to_dot,
    ExportFormat.MERMAID: to_mermaid,
}


def export_graph(graph: FlowGraph, fmt: str | ExportFormat = ExportFormat.JSON) -> str:
    """Serialize a graph in the requested format.

    Raises:
        UnsupportedFormatError: For any format other than json, dot or mermaid.
    """
    try:
        export_format = ExportFormat(str(fmt).strip().lower())
    except ValueError as err:
        raise UnsupportedFormatError(str(fmt)) from err
    return _EXPORTERS[export_format](graph)
