"""EEM Flow: activity correlation and flow-graph engine.

Discovers relations between captured activity events, assembles them into
directed flow graphs, and analyzes/exports those graphs for retrieval by
AI assistants.
"""

from eemflow.core.errors import (
    EemError,
    FlowNotFoundError,
    InvalidArgumentError,
    UnsupportedFormatError,
)
from eemflow.core.models import (
    ActivityEvent,
    FlowEdge,
    FlowGraph,
    FlowNode,
    Relation,
    RelationType,
)
from eemflow.correlation import DetectionConfig, detect_correlations
from eemflow.flow.analyzer import (
    analyze_graph,
    connected_components,
    density,
    has_eulerian_circuit,
    has_eulerian_path,
)
from eemflow.flow.builder import build_graph
from eemflow.flow.exporter import ExportFormat, export_graph

__all__ = [
    "ActivityEvent",
    "DetectionConfig",
    "EemError",
    "ExportFormat",
    "FlowEdge",
    "FlowGraph",
    "FlowNode",
    "FlowNotFoundError",
    "InvalidArgumentError",
    "Relation",
    "RelationType",
    "UnsupportedFormatError",
    "analyze_graph",
    "build_graph",
    "connected_components",
    "density",
    "detect_correlations",
    "export_graph",
    "has_eulerian_circuit",
    "has_eulerian_path",
]
