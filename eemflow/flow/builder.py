"""Flow graph builder: turns events and relations into a directed graph.

Edges are added in a fixed priority order:

1. Explicit relations: each consecutive pair of related event ids that
   both resolve to nodes becomes an edge weighted by relation strength.
2. Temporal fallback: only when step 1 produced no edge, a
   ``temporal_sequence`` chain links nodes in timestamp order.
3. Semantic backfill: same-type nodes that are not neighbours in their
   chronological type group and are not yet connected in either
   direction get a ``semantic`` edge of weight 0.5.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import timedelta

from eemflow.core.models import ActivityEvent, FlowEdge, FlowGraph, FlowNode, Relation, RelationType

logger = logging.getLogger(__name__)

TEMPORAL_SEQUENCE = "temporal_sequence"
FALLBACK_EDGE_WEIGHT = 1.0
SEMANTIC_BACKFILL_WEIGHT = 0.5

LABEL_MAX_CHARS = 50

# activity type -> label prefix
_LABEL_PREFIXES: dict[str, str] = {
    "edit": "Edit",
    "coding": "Edit",
    "code_edit": "Edit",
    "navigation": "Nav",
    "search": "Search",
    "query": "Search",
    "web_search": "Search",
    "execution": "Run",
    "run": "Run",
}


def node_label(event: ActivityEvent) -> str:
    """Short display label: a type prefix plus truncated, single-line content."""
    content = event.content.replace("\r", "").replace("\n", " ")
    if len(content) > LABEL_MAX_CHARS:
        content = content[: LABEL_MAX_CHARS - 3] + "..."
    prefix = _LABEL_PREFIXES.get(event.activity_type.lower(), event.activity_type)
    return f"{prefix}: {content}"


def format_duration(delta: timedelta) -> str:
    seconds = int(delta.total_seconds())
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def flow_summary(events: Sequence[ActivityEvent], relations: Sequence[Relation]) -> str:
    """One-line description of the activity a flow covers."""
    if not events:
        return "Empty flow with no activities."

    parts = [f"Flow of {len(events)} activities"]
    if relations:
        parts.append(f" with {len(relations)} relations")

    start = min(e.timestamp for e in events)
    end = max(e.timestamp for e in events)
    parts.append(f" from {start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M}")
    parts.append(f" (duration: {format_duration(end - start)})")

    top = Counter(e.activity_type for e in events).most_common(3)
    if top:
        parts.append(". Top types: " + ", ".join(f"{t} ({n})" for t, n in top))
    return "".join(parts)


def _relation_edges(relations: Iterable[Relation], node_by_event: dict[str, FlowNode]) -> list[FlowEdge]:
    edges: list[FlowEdge] = []
    skipped = 0
    for relation in relations:
        ids = relation.related_event_ids
        for source_event, target_event in zip(ids, ids[1:]):
            source = node_by_event.get(source_event)
            target = node_by_event.get(target_event)
            if source is None or target is None:
                skipped += 1
                continue
            edges.append(
                FlowEdge(
                    source_node_id=source.id,
                    target_node_id=target.id,
                    relation_type=str(relation.relation_type),
                    weight=relation.strength,
                )
            )
    if skipped:
        logger.debug("Skipped %d relation pairs referencing unknown events", skipped)
    return edges


def _fallback_chain(chronological: Sequence[FlowNode]) -> list[FlowEdge]:
    return [
        FlowEdge(
            source_node_id=a.id,
            target_node_id=b.id,
            relation_type=TEMPORAL_SEQUENCE,
            weight=FALLBACK_EDGE_WEIGHT,
        )
        for a, b in zip(chronological, chronological[1:])
    ]


def _semantic_backfill(chronological: Sequence[FlowNode], edges: Sequence[FlowEdge]) -> list[FlowEdge]:
    connected = {frozenset((e.source_node_id, e.target_node_id)) for e in edges}
    groups: dict[str, list[FlowNode]] = {}
    for node in chronological:
        groups.setdefault(node.node_type, []).append(node)

    added: list[FlowEdge] = []
    for group in groups.values():
        for i in range(len(group)):
            for j in range(i + 2, len(group)):
                pair = frozenset((group[i].id, group[j].id))
                if pair in connected:
                    continue
                connected.add(pair)
                added.append(
                    FlowEdge(
                        source_node_id=group[i].id,
                        target_node_id=group[j].id,
                        relation_type=RelationType.SEMANTIC.value,
                        weight=SEMANTIC_BACKFILL_WEIGHT,
                    )
                )
    return added


def build_graph(
    events: Sequence[ActivityEvent],
    relations: Sequence[Relation] = (),
    *,
    name: str = "",
    categories: Iterable[str] | None = None,
    semantic_backfill: bool = True,
) -> FlowGraph:
    """Assemble a flow graph from events and relations.

    Args:
        events: Events to represent; one node per distinct event id.
        relations: Detected or manual relations; pairs naming unknown
            events are skipped.
        name: Display name for the flow.
        categories: Optional category labels.
        semantic_backfill: Whether to run the same-type backfill step.

    Returns:
        A new graph. Empty input yields a graph with no nodes.
    """
    nodes: list[FlowNode] = []
    node_by_event: dict[str, FlowNode] = {}
    event_by_id: dict[str, ActivityEvent] = {}
    for event in events:
        if event.id in node_by_event:
            continue
        node = FlowNode(
            event_id=event.id,
            node_type=event.activity_type,
            label=node_label(event),
            metadata={"timestamp": event.timestamp.isoformat(), "source": event.source},
        )
        nodes.append(node)
        node_by_event[event.id] = node
        event_by_id[event.id] = event

    chronological = sorted(nodes, key=lambda n: event_by_id[n.event_id].timestamp)

    edges = _relation_edges(relations, node_by_event)
    if not edges:
        edges = _fallback_chain(chronological)
    if semantic_backfill:
        edges.extend(_semantic_backfill(chronological, edges))

    graph = FlowGraph(
        name=name,
        nodes=nodes,
        edges=edges,
        categories=list(categories or []),
        summary=flow_summary(list(event_by_id.values()), relations),
    )
    logger.info("Built flow graph %s: %d nodes, %d edges", graph.id, len(nodes), len(edges))
    return graph
