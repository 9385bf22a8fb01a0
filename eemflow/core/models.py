"""Data model for activity events, relations and flow graphs.

Plain data containers with no behaviour beyond (de)serialization. Field
names in ``to_dict`` output are the stable wire names used by the JSON
export and by the stores.
"""

from __future__ import annotations

import base64
import dataclasses
import enum
import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Union

# Open metadata maps hold a small closed set of value types.
MetadataValue = Union[str, int, float, bool, datetime]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime:
    """Coerce an ISO-8601 string, epoch seconds or datetime into an aware datetime."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)):
        ts = datetime.fromtimestamp(value, UTC)
    elif isinstance(value, str):
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Cannot interpret {value!r} as a timestamp")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def _encode_metadata(metadata: dict[str, MetadataValue]) -> dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in metadata.items()}


class RelationType(enum.StrEnum):
    """Relation kinds produced by automatic detection.

    Manual relations may carry any other non-empty string; see
    :func:`relation_kind`.
    """

    TEMPORAL = "temporal"
    CAUSAL = "causal"
    SEMANTIC = "semantic"
    CONTEXTUAL = "contextual"


def relation_kind(value: str) -> RelationType | str:
    """Return the detected-relation enum member for ``value``, or the raw manual type."""
    try:
        return RelationType(value.lower())
    except ValueError:
        return value


@dataclass(frozen=True)
class ActivityEvent:
    """A single recorded user or assistant action.

    Attributes:
        id: Opaque unique identifier, assigned at creation.
        timestamp: When the activity occurred.
        activity_type: Free-form category, e.g. ``code_edit`` or ``navigation``.
        content: Text body of the activity.
        source: Origin label (tool or assistant name).
        session_id: Logical session the event belongs to.
        metadata: Supplementary attributes such as file path or project.
        associated_file: Optional file the activity touched.
    """

    timestamp: datetime
    activity_type: str
    content: str = ""
    source: str = ""
    session_id: str = ""
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    associated_file: str | None = None
    id: str = field(default_factory=new_id)

    @property
    def content_hash(self) -> str | None:
        """SHA-256 of the content (base64), used for duplicate detection."""
        if not self.content:
            return None
        digest = hashlib.sha256(self.content.encode("utf-8")).digest()
        return base64.b64encode(digest).decode("ascii")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "activity_type": self.activity_type,
            "content": self.content,
            "source": self.source,
            "session_id": self.session_id,
            "metadata": _encode_metadata(self.metadata),
            "associated_file": self.associated_file,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityEvent:
        return cls(
            id=str(data.get("id") or new_id()),
            timestamp=parse_timestamp(data["timestamp"]),
            activity_type=data.get("activity_type", ""),
            content=data.get("content", ""),
            source=data.get("source", ""),
            session_id=data.get("session_id", ""),
            metadata=dict(data.get("metadata") or {}),
            associated_file=data.get("associated_file"),
        )


@dataclass(frozen=True)
class Relation:
    """A detected or manually declared correlation between events.

    ``related_event_ids`` is ordered; graph building walks consecutive pairs.
    Ids are not checked against known events.
    """

    relation_type: str
    related_event_ids: list[str]
    strength: float
    description: str = ""
    tags: list[str] = field(default_factory=list)
    session_id: str = ""
    timestamp: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    @property
    def kind(self) -> RelationType | str:
        return relation_kind(self.relation_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "relation_type": str(self.relation_type),
            "related_event_ids": list(self.related_event_ids),
            "strength": self.strength,
            "description": self.description,
            "tags": list(self.tags),
            "session_id": self.session_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Relation:
        return cls(
            id=str(data.get("id") or new_id()),
            timestamp=parse_timestamp(data["timestamp"]) if data.get("timestamp") else utc_now(),
            relation_type=data["relation_type"],
            related_event_ids=[str(i) for i in data.get("related_event_ids", [])],
            strength=float(data.get("strength", 0.0)),
            description=data.get("description", ""),
            tags=list(data.get("tags", [])),
            session_id=data.get("session_id", ""),
        )


@dataclass(frozen=True)
class FlowNode:
    """A graph node standing for exactly one activity event."""

    event_id: str
    node_type: str
    label: str = ""
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "node_type": self.node_type,
            "label": self.label,
            "metadata": _encode_metadata(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowNode:
        return cls(
            id=str(data["id"]),
            event_id=str(data["event_id"]),
            node_type=data.get("node_type", ""),
            label=data.get("label", ""),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class FlowEdge:
    """A directed, typed, weighted connection between two nodes."""

    source_node_id: str
    target_node_id: str
    relation_type: str
    weight: float = 1.0
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source_node_id": self.source_node_id,
            "target_node_id": self.target_node_id,
            "relation_type": str(self.relation_type),
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowEdge:
        return cls(
            id=str(data["id"]),
            source_node_id=str(data["source_node_id"]),
            target_node_id=str(data["target_node_id"]),
            relation_type=data.get("relation_type", ""),
            weight=float(data.get("weight", 1.0)),
        )


@dataclass(frozen=True)
class FlowGraph:
    """Directed multigraph of activity nodes built for one session or window.

    A graph with no nodes is valid and means "no activity".
    """

    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)
    name: str = ""
    summary: str = ""
    categories: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def valid_edges(self) -> list[FlowEdge]:
        """Edges whose endpoints are both nodes of this graph, in order."""
        known = self.node_ids()
        return [e for e in self.edges if e.source_node_id in known and e.target_node_id in known]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "summary": self.summary,
            "categories": list(self.categories),
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.valid_edges()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowGraph:
        """Rebuild a graph from ``to_dict`` output.

        Edges whose endpoints are not among the nodes are dropped.
        """
        graph = cls(
            id=str(data.get("id") or new_id()),
            name=data.get("name", ""),
            created_at=parse_timestamp(data["created_at"]) if data.get("created_at") else utc_now(),
            summary=data.get("summary", ""),
            categories=list(data.get("categories", [])),
            nodes=[FlowNode.from_dict(n) for n in data.get("nodes", [])],
            edges=[FlowEdge.from_dict(e) for e in data.get("edges", [])],
        )
        return dataclasses.replace(graph, edges=graph.valid_edges())
