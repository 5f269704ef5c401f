"""
CSV codec - graph as a pair of tables (nodes and edges).

One base name addresses two files: a trailing ".csv" is stripped and
"_nodes.csv" / "_edges.csv" appended. The same rule applies on import and
export, so ``graph.csv`` and ``graph`` both mean ``graph_nodes.csv`` +
``graph_edges.csv``.

Edge labels are flattened to one cell. See join_labels()/split_labels().

Author: GraphVault contributors
License: MIT
"""

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from graphvault_core.codecs.base import GraphCodec, PathLike, read_bytes
from graphvault_core.exceptions import CodecSyntaxError
from graphvault_core.models import Graph

NODES_SUFFIX = "_nodes.csv"
EDGES_SUFFIX = "_edges.csv"

NODE_COLUMNS = ["id", "label", "type"]
EDGE_COLUMNS = ["source", "target", "label"]

REQUIRED_NODE_COLUMNS = ("id", "label")
REQUIRED_EDGE_COLUMNS = ("source", "target", "label")


def join_labels(labels: Sequence[str]) -> str:
    """
    Flatten an edge label list into one CSV cell by comma-joining.

    One-directional: split_labels() does not undo this. ``["a", "b"]``
    becomes ``"a,b"`` and is read back as the single label ``["a,b"]``.
    Single-label edges round-trip exactly.
    """
    return ",".join(labels)


def split_labels(cell: str) -> List[str]:
    """Read a CSV label cell back as a one-element label list."""
    return [cell]


def derive_csv_paths(path: PathLike) -> List[Path]:
    """Return the [nodes, edges] file pair for a base name."""
    base = str(path)
    if base.endswith(".csv"):
        base = base[: -len(".csv")]
    return [Path(base + NODES_SUFFIX), Path(base + EDGES_SUFFIX)]


@dataclass
class CsvTables:
    """Encoded nodes and edges tables."""

    nodes: bytes
    edges: bytes


class CSVCodec(GraphCodec):
    """
    Encode/decode graphs as two CSV tables.

    Node columns: id, label, type. Edge columns: source, target, label.
    Extra node fields are not written.
    """

    format_name = "csv"
    extensions = (".csv",)

    def __init__(self, pretty_print: bool = True, delimiter: str = ",") -> None:
        super().__init__(pretty_print=pretty_print)
        self.delimiter = delimiter

    def parse(self, data: CsvTables, source: str = "<bytes>") -> Dict[str, Any]:
        return self.parse_tables(data.nodes, data.edges, source)

    def parse_tables(
        self, nodes_data: bytes, edges_data: bytes, source: str = "<bytes>"
    ) -> Dict[str, Any]:
        """
        Parse node and edge tables into a raw payload.

        Args:
            nodes_data: Bytes of the nodes table
            edges_data: Bytes of the edges table
            source: Base name used in error messages

        Raises:
            CodecSyntaxError: If a table is malformed or lacks required columns
        """
        if source == "<bytes>":
            nodes_source, edges_source = "<nodes>", "<edges>"
        else:
            nodes_source, edges_source = (str(p) for p in derive_csv_paths(source))

        node_rows = self._read_rows(nodes_data, nodes_source, REQUIRED_NODE_COLUMNS)
        edge_rows = self._read_rows(edges_data, edges_source, REQUIRED_EDGE_COLUMNS)

        nodes = [
            {"id": row["id"], "label": row["label"], "type": row.get("type") or None}
            for row in node_rows
        ]
        edges = [
            {
                "source": row["source"],
                "target": row["target"],
                "label": split_labels(row["label"]) if row["label"] else None,
            }
            for row in edge_rows
        ]
        return {"nodes": nodes, "edges": edges}

    def encode(self, graph: Graph) -> CsvTables:
        node_rows = [{"id": n.id, "label": n.label, "type": n.type} for n in graph.nodes]
        edge_rows = [
            {"source": e.source, "target": e.target, "label": join_labels(e.label)}
            for e in graph.edges
        ]
        return CsvTables(
            nodes=self._write_rows(NODE_COLUMNS, node_rows),
            edges=self._write_rows(EDGE_COLUMNS, edge_rows),
        )

    def resolve_paths(self, path: PathLike) -> List[Path]:
        return derive_csv_paths(path)

    def read(self, path: PathLike) -> Dict[str, Any]:
        nodes_path, edges_path = self.resolve_paths(path)
        return self.parse_tables(read_bytes(nodes_path), read_bytes(edges_path), str(path))

    def write(self, graph: Graph, path: PathLike) -> List[Path]:
        nodes_path, edges_path = self.resolve_paths(path)
        tables = self.encode(graph)
        nodes_path.write_bytes(tables.nodes)
        edges_path.write_bytes(tables.edges)
        return [nodes_path, edges_path]

    def _read_rows(
        self, data: bytes, source: str, required: Sequence[str]
    ) -> List[Dict[str, str]]:
        text = self.decode_text(data, source)
        reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=self.delimiter)

        try:
            header = reader.fieldnames or []
            missing = [column for column in required if column not in header]
            if missing:
                raise CodecSyntaxError(
                    f"{source} is missing required columns: {', '.join(missing)}",
                    error_code="CODEC_002",
                    details={"source": source, "missing_columns": missing},
                )

            rows = []
            for row in reader:
                # Overflow cells land under the None key; short rows yield None values.
                values = {key: value or "" for key, value in row.items() if key is not None}
                if not any(value.strip() for value in values.values()):
                    continue
                rows.append(values)
            return rows
        except csv.Error as e:
            raise CodecSyntaxError(
                f"Invalid CSV in {source} (line {reader.line_num}): {e}",
                details={"source": source, "line": reader.line_num},
                original_exception=e,
            ) from e

    def _write_rows(self, columns: List[str], rows: List[Dict[str, str]]) -> bytes:
        buffer = io.StringIO(newline="")
        writer = csv.DictWriter(
            buffer, fieldnames=columns, delimiter=self.delimiter, lineterminator="\n"
        )
        writer.writeheader()
        writer.writerows(rows)
        return buffer.getvalue().encode("utf-8")
