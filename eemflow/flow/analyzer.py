"""Read-only structural analysis of flow graphs.

Degrees are undirected: every edge counts once towards each endpoint,
self-loops twice towards their node. A missing graph (``None``) is
analyzed as the empty graph.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from eemflow.core.models import FlowGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphAnalysis:
    """All structural metrics of one graph.

    Attributes:
        node_count: Number of nodes.
        edge_count: Number of edges referencing known nodes.
        has_eulerian_circuit: Every node has even degree.
        has_eulerian_path: Zero or exactly two nodes have odd degree.
        odd_degree_nodes: Ids of the odd-degree nodes.
        connected_components: Number of undirected components.
        density: ``2|E| / (|V|(|V|-1))``, 0 for fewer than two nodes.
    """

    node_count: int = 0
    edge_count: int = 0
    has_eulerian_circuit: bool = True
    has_eulerian_path: bool = True
    odd_degree_nodes: list[str] = field(default_factory=list)
    connected_components: int = 0
    density: float = 0.0


def _valid_edges(graph: FlowGraph) -> list[tuple[str, str]]:
    return [(e.source_node_id, e.target_node_id) for e in graph.valid_edges()]


def node_degrees(graph: FlowGraph | None) -> dict[str, int]:
    """Undirected degree (in + out) of every node, isolated nodes included."""
    if graph is None:
        return {}
    degrees = {n.id: 0 for n in graph.nodes}
    for source, target in _valid_edges(graph):
        degrees[source] += 1
        degrees[target] += 1
    return degrees


def odd_degree_nodes(graph: FlowGraph | None) -> list[str]:
    return [node_id for node_id, degree in node_degrees(graph).items() if degree % 2]


def has_eulerian_circuit(graph: FlowGraph | None) -> bool:
    """True iff every node has even degree (degree 0 counts as even)."""
    return not odd_degree_nodes(graph)


def has_eulerian_path(graph: FlowGraph | None) -> bool:
    """True iff the number of odd-degree nodes is 0 or exactly 2."""
    return len(odd_degree_nodes(graph)) in (0, 2)


def connected_components(graph: FlowGraph | None) -> int:
    """Count undirected connected components with an iterative depth-first search."""
    if graph is None or not graph.nodes:
        return 0

    adjacency: dict[str, set[str]] = defaultdict(set)
    for source, target in _valid_edges(graph):
        adjacency[source].add(target)
        adjacency[target].add(source)

    visited: set[str] = set()
    components = 0
    for node in graph.nodes:
        if node.id in visited:
            continue
        components += 1
        stack = [node.id]
        visited.add(node.id)
        while stack:
            current = stack.pop()
            for neighbour in adjacency[current]:
                if neighbour not in visited:
                    visited.add(neighbour)
                    stack.append(neighbour)
    return components


def density(graph: FlowGraph | None) -> float:
    if graph is None:
        return 0.0
    n = len(graph.nodes)
    if n <= 1:
        return 0.0
    return 2 * len(_valid_edges(graph)) / (n * (n - 1))


def analyze_graph(graph: FlowGraph | None) -> GraphAnalysis:
    """Collect the structural metrics of ``graph`` into a GraphAnalysis."""
    if graph is None:
        return GraphAnalysis()

    odd = odd_degree_nodes(graph)
    analysis = GraphAnalysis(
        node_count=len(graph.nodes),
        edge_count=len(_valid_edges(graph)),
        has_eulerian_circuit=not odd,
        has_eulerian_path=len(odd) in (0, 2),
        odd_degree_nodes=odd,
        connected_components=connected_components(graph),
        density=density(graph),
    )
    logger.debug(
        "Analyzed graph %s: components=%d density=%.3f odd=%d",
        graph.id,
        analysis.connected_components,
        analysis.density,
        len(odd),
    )
    return analysis
