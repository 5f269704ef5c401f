"""
Graph validation - converts raw decoded payloads into the Graph model.

Raw payloads are whatever a codec parsed from bytes (dicts and lists of
unknown shape). validate_graph() is the only place that inspects them;
everything downstream works on Node, Edge and Graph.

Validation is shallow and structural: edges that reference unknown node ids
are accepted here.

Author: GraphVault contributors
License: MIT
"""

import json
from collections.abc import Mapping
from typing import Any, List

import structlog

from graphvault_core.exceptions import StructureError
from graphvault_core.models import DEFAULT_NODE_TYPE, Edge, Graph, Node

logger = structlog.get_logger(__name__)

NODE_FIELDS = ("id", "label", "type")


def validate_graph(raw: Any) -> Graph:
    """
    Validate a raw payload and build a Graph.

    Args:
        raw: Decoded payload, expected to be {"nodes": [...], "edges": [...]}

    Returns:
        Graph with normalized nodes and edges (last-write-wins on duplicates)

    Raises:
        StructureError: If the payload, any node or any edge is malformed
    """
    if not isinstance(raw, Mapping):
        raise StructureError(
            "Graph data is not a valid object",
            error_code="STRUCT_002",
            details={"collection": "graph", "field": None, "index": None},
        )

    nodes = raw.get("nodes")
    if not isinstance(nodes, list):
        raise StructureError(
            'Graph must contain a "nodes" array',
            details={"collection": "graph", "field": "nodes", "index": None},
        )

    edges = raw.get("edges")
    if not isinstance(edges, list):
        raise StructureError(
            'Graph must contain an "edges" array',
            details={"collection": "graph", "field": "edges", "index": None},
        )

    graph = Graph.from_parts(
        [validate_node(node, index) for index, node in enumerate(nodes)],
        [validate_edge(edge, index) for index, edge in enumerate(edges)],
    )

    logger.debug(
        "graph_validated",
        nodes_in=len(nodes),
        edges_in=len(edges),
        nodes=graph.node_count,
        edges=graph.edge_count,
    )
    return graph


def validate_node(raw: Any, index: int) -> Node:
    """
    Validate and normalize one node.

    ``id`` may be a string or a number (0 and "" are valid, absent/null is
    not); ``label`` must be a non-empty string; ``type`` defaults to "node".
    Any other keys are kept as extra fields, converted to JSON values
    (dates and other non-JSON scalars become strings).

    Raises:
        StructureError: If the node is malformed
    """
    if not isinstance(raw, Mapping):
        raise _error("Node", "nodes", index, None, "is not a valid object", "STRUCT_002")

    node_id = _require_scalar(raw, "id", "Node", "nodes", index)

    label = raw.get("label")
    if not isinstance(label, str) or not label:
        raise _error("Node", "nodes", index, "label", "missing or invalid 'label' field")

    node_type = raw.get("type")
    if node_type is None:
        node_type = DEFAULT_NODE_TYPE
    else:
        node_type = _to_text(node_type, "Node", "nodes", index, "type")

    extra = _json_fields({str(k): v for k, v in raw.items() if k not in NODE_FIELDS}, index)
    return Node(**extra, id=node_id, label=label, type=node_type)


def validate_edge(raw: Any, index: int) -> Edge:
    """
    Validate and normalize one edge.

    ``source``/``target`` follow the node id rules. ``label`` is required; a
    bare value becomes a one-element list.

    Raises:
        StructureError: If the edge is malformed
    """
    if not isinstance(raw, Mapping):
        raise _error("Edge", "edges", index, None, "is not a valid object", "STRUCT_002")

    source = _require_scalar(raw, "source", "Edge", "edges", index)
    target = _require_scalar(raw, "target", "Edge", "edges", index)
    labels = _normalize_labels(raw.get("label"), index)

    return Edge(source=source, target=target, label=labels)


def _normalize_labels(value: Any, index: int) -> List[str]:
    if value is None:
        raise _error("Edge", "edges", index, "label", "missing required 'label' field")

    if isinstance(value, list):
        if not value:
            raise _error("Edge", "edges", index, "label", "has an empty 'label' list", "STRUCT_003")
        labels = [_to_text(item, "Edge", "edges", index, "label") for item in value]
        if not all(labels):
            raise _error(
                "Edge", "edges", index, "label", "has an empty entry in its 'label' list", "STRUCT_003"
            )
        return labels

    text = _to_text(value, "Edge", "edges", index, "label")
    if not text:
        raise _error("Edge", "edges", index, "label", "has an empty 'label' field", "STRUCT_003")
    return [text]


def _require_scalar(raw: Mapping, field: str, kind: str, collection: str, index: int) -> str:
    value = raw.get(field)
    if value is None:
        raise _error(kind, collection, index, field, f"missing required '{field}' field")
    return _to_text(value, kind, collection, index, field)


def _to_text(value: Any, kind: str, collection: str, index: int, field: str) -> str:
    """Coerce a string or number to text; anything else is rejected."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _error(
            kind,
            collection,
            index,
            field,
            f"has invalid '{field}' value of type {type(value).__name__}",
            "STRUCT_002",
        )
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _error(
    kind: str,
    collection: str,
    index: int,
    field: Any,
    problem: str,
    error_code: str = "STRUCT_001",
) -> StructureError:
    return StructureError(
        f"{kind} at index {index} {problem}",
        error_code=error_code,
        details={"collection": collection, "index": index, "field": field},
    )


def _json_fields(extra: dict, index: int) -> dict:
    """Round-trip extra node fields through JSON so storage can serialize them."""
    try:
        return json.loads(json.dumps(extra, default=str, ensure_ascii=False))
    except (TypeError, ValueError) as e:
        raise _error(
            "Node",
            "nodes",
            index,
            None,
            f"has extra fields that are not JSON values: {e}",
            "STRUCT_002",
        ) from e
