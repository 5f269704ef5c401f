"""
Data models for graphvault_db module.

Defines the canonical graph model shared by storage, validation and codecs:
Node and Edge (Pydantic models) and Graph (ordered, last-write-wins container).
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NODE_TYPE = "node"

EdgeKey = Tuple[str, str, str]


def serialize_labels(labels: List[str]) -> str:
    """Serialize an edge label list to its compact JSON storage form."""
    return json.dumps(labels, separators=(",", ":"), ensure_ascii=False)


class Node(BaseModel):
    """Graph vertex. Unknown keys are carried through as extra fields."""

    model_config = ConfigDict(extra="allow")

    id: str
    label: str = Field(..., min_length=1)
    type: str = DEFAULT_NODE_TYPE

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def to_record(self) -> Dict[str, Any]:
        """Full node record, identity fields first."""
        return {"id": self.id, "label": self.label, "type": self.type, **self.extra_fields}


class Edge(BaseModel):
    """Directed edge with one or more labels."""

    source: str
    target: str
    label: List[str] = Field(..., min_length=1)

    @property
    def serialized_label(self) -> str:
        return serialize_labels(self.label)

    @property
    def key(self) -> EdgeKey:
        """Identity tuple used for deduplication."""
        return (self.source, self.target, self.serialized_label)

    def to_record(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "label": list(self.label)}


@dataclass
class Graph:
    """
    In-memory graph with last-write-wins semantics.

    Nodes are keyed by id and edges by (source, target, serialized label).
    Re-adding an existing key replaces the prior value and moves it to the
    end of the ordering, the same way INSERT OR REPLACE behaves in storage.
    """

    _nodes: Dict[str, Node] = field(default_factory=dict)
    _edges: Dict[EdgeKey, Edge] = field(default_factory=dict)

    @classmethod
    def from_parts(cls, nodes: List[Node], edges: List[Edge]) -> "Graph":
        graph = cls()
        for node in nodes:
            graph.add_node(node)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    def add_node(self, node: Node) -> None:
        self._nodes.pop(node.id, None)
        self._nodes[node.id] = node

    def add_edge(self, edge: Edge) -> None:
        key = edge.key
        self._edges.pop(key, None)
        self._edges[key] = edge

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def node_ids(self) -> Set[str]:
        return set(self._nodes)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def dangling_edges(self, known_ids: Optional[Set[str]] = None) -> List[Edge]:
        """
        Edges whose source or target is not a node id.

        Args:
            known_ids: Extra ids treated as present (e.g. ids already in storage)

        Returns:
            Dangling edges in insertion order
        """
        ids = self.node_ids()
        if known_ids:
            ids |= known_ids
        return [e for e in self._edges.values() if e.source not in ids or e.target not in ids]

    def to_dict(self) -> Dict[str, Any]:
        """Structural mirror used by the JSON and YAML codecs."""
        return {
            "nodes": [node.to_record() for node in self._nodes.values()],
            "edges": [edge.to_record() for edge in self._edges.values()],
        }
