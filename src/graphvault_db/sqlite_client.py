"""
SQLiteGraphStore - Async SQLite persistence for GraphVault graphs.

Wraps a single aiosqlite connection. All node and edge writes of one
upsert_graph() call run inside one transaction; reads used for export run
inside a read transaction so they see a consistent snapshot.

Author: GraphVault contributors
License: MIT
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import aiosqlite
import structlog

from graphvault_db.exceptions import ConnectionError, TransactionError
from graphvault_db.models import Edge, Graph, Node
from graphvault_db.schema_manager import SchemaManager

logger = structlog.get_logger(__name__)

EDGE_DIRECTIONS = ("out", "in", "both")


class SQLiteGraphStore:
    """
    Async SQLite store for one graph.

    One store file holds exactly one graph in two tables, ``nodes`` and
    ``edges`` (see SchemaManager). Writes replace on conflict, so
    re-importing the same data is idempotent.

    Example:
        >>> async with SQLiteGraphStore("arguing.sqlite") as store:
        ...     await store.upsert_graph(graph)
        ...     exported = await store.read_graph()
    """

    MEMORY_PATH = ":memory:"

    def __init__(self, database_path: Union[str, Path] = "arguing.sqlite") -> None:
        """
        Initialize store configuration.

        Note: Does NOT open the database. Call init_async() or use the store
        as an async context manager.

        Args:
            database_path: SQLite file path, or ":memory:"

        Raises:
            ValueError: If database_path is empty
        """
        if not str(database_path).strip():
            raise ValueError("database_path cannot be empty")

        self.database_path = str(database_path)
        self._conn: Optional[aiosqlite.Connection] = None
        self._schema_manager: Optional[SchemaManager] = None
        self._initialized = False
        self._closed = False

        self._logger = logger.bind(database=self.database_path)

    async def __aenter__(self) -> "SQLiteGraphStore":
        await self.init_async()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._initialized and not self._closed

    async def init_async(self) -> None:
        """
        Open the connection and ensure the schema exists.

        Raises:
            ConnectionError: If the store is closed or cannot be opened
            SchemaError: If schema creation fails
        """
        if self._initialized:
            self._logger.debug("already_initialized")
            return

        if self._closed:
            raise ConnectionError("Store has been closed. Create new instance.")

        if self.database_path != self.MEMORY_PATH:
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Autocommit mode; transactions are issued explicitly.
            self._conn = await aiosqlite.connect(self.database_path, isolation_level=None)
        except (aiosqlite.Error, OSError) as e:
            self._logger.error("open_failed", error=str(e))
            raise ConnectionError(f"Failed to open SQLite store: {e}") from e

        try:
            self._schema_manager = SchemaManager(connection=self._conn, logger=self._logger)
            await self._schema_manager.init_schema()
        except Exception:
            await self._conn.close()
            self._conn = None
            raise

        self._initialized = True
        self._logger.info("store_opened")

    async def ensure_schema(self) -> None:
        """Create tables and indexes if absent. Idempotent."""
        conn = self._require_connection()
        if self._schema_manager is None:
            self._schema_manager = SchemaManager(connection=conn, logger=self._logger)
        await self._schema_manager.init_schema()

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._closed:
            return

        if self._conn is not None:
            await self._conn.close()
            self._conn = None

        self._closed = True
        self._initialized = False
        self._logger.info("store_closed")

    # ========================================================================
    # Writes
    # ========================================================================

    async def upsert_graph(self, graph: Graph) -> Tuple[int, int]:
        """
        Write all nodes and edges of a graph in one atomic transaction.

        Nodes are stored as JSON bodies; a node whose id already exists
        replaces the stored row. Edges replace an existing row with the same
        (source, target, serialized label).

        Args:
            graph: Validated graph to persist

        Returns:
            Tuple of (nodes_written, edges_written)

        Raises:
            ConnectionError: If the store is not open
            TransactionError: If a node cannot be serialized or any write fails
                (the batch is rolled back)
        """
        conn = self._require_connection()
        await self.ensure_schema()

        try:
            node_rows = [
                (json.dumps(node.to_record(), ensure_ascii=False),) for node in graph.nodes
            ]
        except (TypeError, ValueError) as e:
            raise TransactionError(
                f"Graph contains node fields that are not JSON values: {e}"
            ) from e
        edge_rows = [(edge.source, edge.target, edge.serialized_label) for edge in graph.edges]

        try:
            await conn.execute("BEGIN")
            await conn.executemany("INSERT OR REPLACE INTO nodes (body) VALUES (?)", node_rows)
            await conn.executemany(
                "INSERT OR REPLACE INTO edges (source, target, properties) VALUES (?, ?, ?)",
                edge_rows,
            )
            await conn.execute("COMMIT")
        except aiosqlite.Error as e:
            await self._rollback()
            self._logger.error("upsert_failed", error=str(e))
            raise TransactionError(f"Graph write failed and was rolled back: {e}") from e
        except Exception:
            await self._rollback()
            raise

        self._logger.info("graph_upserted", nodes=len(node_rows), edges=len(edge_rows))
        return len(node_rows), len(edge_rows)

    async def clear_all(self) -> None:
        """
        Delete every node and edge in one transaction.

        Raises:
            TransactionError: If the delete fails
        """
        conn = self._require_connection()
        try:
            await conn.execute("BEGIN")
            await conn.execute("DELETE FROM edges")
            await conn.execute("DELETE FROM nodes")
            await conn.execute("COMMIT")
        except aiosqlite.Error as e:
            await self._rollback()
            raise TransactionError(f"Failed to clear store: {e}") from e
        except Exception:
            await self._rollback()
            raise

        self._logger.warning("store_cleared")

    # ========================================================================
    # Reads
    # ========================================================================

    async def read_all_nodes(self) -> List[Node]:
        """Return every stored node, in rowid order."""
        rows = await self._fetchall("SELECT body FROM nodes ORDER BY rowid")
        return [self._row_to_node(row) for row in rows]

    async def read_all_edges(self) -> List[Edge]:
        """Return every stored edge, in rowid order."""
        rows = await self._fetchall(
            "SELECT source, target, properties FROM edges ORDER BY rowid"
        )
        return [self._row_to_edge(row) for row in rows]

    async def read_graph(self) -> Graph:
        """
        Read the full graph from one consistent snapshot.

        Returns:
            Graph with all stored nodes and edges

        Raises:
            ConnectionError: If the store is not open
            TransactionError: If the read transaction fails or a stored row
                cannot be decoded (the transaction is rolled back)
        """
        conn = self._require_connection()
        try:
            await conn.execute("BEGIN")
            nodes = await self.read_all_nodes()
            edges = await self.read_all_edges()
            await conn.execute("COMMIT")
        except (aiosqlite.Error, ValueError) as e:
            # ValueError covers undecodable bodies and rows the models reject.
            await self._rollback()
            raise TransactionError(f"Failed to read graph: {e}") from e
        except Exception:
            await self._rollback()
            raise

        self._logger.debug("graph_read", nodes=len(nodes), edges=len(edges))
        return Graph.from_parts(nodes, edges)

    async def get_node(self, node_id: str) -> Optional[Node]:
        """Look up one node by id using the id index."""
        rows = await self._fetchall("SELECT body FROM nodes WHERE id = ?", (node_id,))
        return self._row_to_node(rows[0]) if rows else None

    async def get_edges(self, node_id: str, direction: str = "out") -> List[Edge]:
        """
        Return edges touching a node.

        Args:
            node_id: Node id to look up
            direction: "out" (node is source), "in" (node is target) or "both"

        Raises:
            ValueError: If direction is not recognized
        """
        if direction not in EDGE_DIRECTIONS:
            raise ValueError(f"direction must be one of {EDGE_DIRECTIONS}, got '{direction}'")

        select = "SELECT source, target, properties FROM edges"
        if direction == "out":
            rows = await self._fetchall(f"{select} WHERE source = ? ORDER BY rowid", (node_id,))
        elif direction == "in":
            rows = await self._fetchall(f"{select} WHERE target = ? ORDER BY rowid", (node_id,))
        else:
            rows = await self._fetchall(
                f"{select} WHERE source = ? OR target = ? ORDER BY rowid", (node_id, node_id)
            )
        return [self._row_to_edge(row) for row in rows]

    async def node_ids(self) -> Set[str]:
        rows = await self._fetchall("SELECT id FROM nodes")
        return {row[0] for row in rows}

    async def get_stats(self) -> Dict[str, Any]:
        """
        Return store statistics.

        Returns:
            Dict with nodes, edges, dangling_edges and database_path
        """
        nodes = await self._fetchall("SELECT COUNT(*) FROM nodes")
        edges = await self._fetchall("SELECT COUNT(*) FROM edges")
        dangling = await self._fetchall(
            """
            SELECT COUNT(*) FROM edges
            WHERE source NOT IN (SELECT id FROM nodes)
               OR target NOT IN (SELECT id FROM nodes)
            """
        )
        return {
            "nodes": nodes[0][0],
            "edges": edges[0][0],
            "dangling_edges": dangling[0][0],
            "database_path": self.database_path,
        }

    # ========================================================================
    # Private Helpers
    # ========================================================================

    def _require_connection(self) -> aiosqlite.Connection:
        if self._closed:
            raise ConnectionError("Store has been closed. Create new instance.")
        if self._conn is None:
            raise ConnectionError("Store is not open. Call init_async() first.")
        return self._conn

    async def _fetchall(self, query: str, parameters: Tuple[Any, ...] = ()) -> List[Any]:
        conn = self._require_connection()
        async with conn.execute(query, parameters) as cursor:
            return list(await cursor.fetchall())

    async def _rollback(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            await self._conn.execute("ROLLBACK")

    @staticmethod
    def _row_to_node(row: Any) -> Node:
        body = json.loads(row[0])
        # Stores written by older tools may hold numeric ids and types.
        for key in ("id", "label", "type"):
            if key in body and body[key] is not None:
                body[key] = _to_text(body[key])
        return Node(**body)

    @staticmethod
    def _row_to_edge(row: Any) -> Edge:
        label = json.loads(row[2])
        # Stores written by older tools may hold a bare string label.
        if isinstance(label, str):
            label = [label]
        return Edge(source=row[0], target=row[1], label=[_to_text(item) for item in label])


def _to_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
