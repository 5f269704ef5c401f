"""
SchemaManager - Manages the relational schema for the GraphVault store.

This module provides idempotent schema initialization, schema verification
and a destructive reset used by tests.

Author: GraphVault contributors
License: MIT
"""

from typing import Any, Dict, List, Optional

import aiosqlite
import structlog
from structlog.stdlib import BoundLogger

from graphvault_db.exceptions import SchemaError


class SchemaManager:
    """
    Manages the two-table schema of a GraphVault SQLite store.

    The ``nodes`` table stores each node as an opaque JSON body plus a
    generated, unique ``id`` column extracted from that body, so identity
    uniqueness is enforced by SQLite itself. The ``edges`` table stores
    source, target and the serialized label list under a unique constraint
    with replace-on-conflict semantics. Foreign keys from edges to nodes
    are declared but not enforced (``PRAGMA foreign_keys`` is left off).

    Attributes:
        connection: Open aiosqlite connection
        logger: Structured logger for schema operations
        schema_version: Current schema version (e.g., "1.0.0")
        initialized: Flag indicating if schema has been initialized

    Example:
        ```python
        conn = await aiosqlite.connect("arguing.sqlite", isolation_level=None)

        schema_manager = SchemaManager(connection=conn)
        await schema_manager.init_schema()  # Idempotent

        status = await schema_manager.verify_schema()
        print(status["issues"])  # []
        ```
    """

    SCHEMA_VERSION: str = "1.0.0"

    TABLE_NODES: str = "nodes"
    TABLE_EDGES: str = "edges"

    INDEX_NODE_ID: str = "id_idx"
    INDEX_EDGE_SOURCE: str = "source_idx"
    INDEX_EDGE_TARGET: str = "target_idx"

    CREATE_STATEMENTS: List[str] = [
        """
        CREATE TABLE IF NOT EXISTS nodes (
            body TEXT,
            id   TEXT GENERATED ALWAYS AS (json_extract(body, '$.id')) VIRTUAL NOT NULL UNIQUE
        )
        """,
        "CREATE INDEX IF NOT EXISTS id_idx ON nodes(id)",
        """
        CREATE TABLE IF NOT EXISTS edges (
            source     TEXT,
            target     TEXT,
            properties TEXT,
            UNIQUE(source, target, properties) ON CONFLICT REPLACE,
            FOREIGN KEY(source) REFERENCES nodes(id),
            FOREIGN KEY(target) REFERENCES nodes(id)
        )
        """,
        "CREATE INDEX IF NOT EXISTS source_idx ON edges(source)",
        "CREATE INDEX IF NOT EXISTS target_idx ON edges(target)",
    ]

    def __init__(
        self, connection: aiosqlite.Connection, logger: Optional[BoundLogger] = None
    ) -> None:
        """
        Initialize SchemaManager.

        Args:
            connection: Open aiosqlite connection
            logger: Optional structured logger (defaults to new logger)

        Raises:
            TypeError: If connection is not an aiosqlite Connection
        """
        if not isinstance(connection, aiosqlite.Connection):
            raise TypeError("connection must be an aiosqlite Connection instance")

        self.connection = connection
        self.logger = logger or structlog.get_logger(__name__)
        self.schema_version = self.SCHEMA_VERSION
        self.initialized = False

    async def init_schema(self) -> None:
        """
        Create tables and indexes if they are absent (idempotent).

        Every statement uses ``IF NOT EXISTS`` so the method is safe to run
        on every open, including against stores written by earlier versions.

        Raises:
            SchemaError: If any DDL statement fails
        """
        if self.initialized:
            self.logger.debug("schema_already_initialized")
            return

        self.logger.debug("initializing_schema", version=self.schema_version)

        for statement in self.CREATE_STATEMENTS:
            await self._execute_ddl(statement)

        self.initialized = True
        self.logger.info("schema_initialized", version=self.schema_version)

    async def verify_schema(self) -> Dict[str, Any]:
        """
        Verify schema consistency and return status.

        Returns:
            Dictionary with keys:
                - version: str
                - initialized: bool (true if no issues)
                - tables: List[str] (existing graph tables)
                - indexes: List[str] (existing graph indexes)
                - issues: List[str] (problems found, empty if OK)

        Raises:
            SchemaError: If sqlite_master cannot be queried
        """
        status: Dict[str, Any] = {
            "version": self.schema_version,
            "initialized": False,
            "tables": [],
            "indexes": [],
            "issues": [],
        }

        try:
            async with self.connection.execute(
                "SELECT type, name FROM sqlite_master WHERE type IN ('table', 'index')"
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            self.logger.error("schema_verification_failed", error=str(e))
            raise SchemaError(f"Failed to verify schema: {e}") from e

        existing = {(row[0], row[1]) for row in rows}

        for table in (self.TABLE_NODES, self.TABLE_EDGES):
            if ("table", table) in existing:
                status["tables"].append(table)
            else:
                status["issues"].append(f"Table {table} not found")

        for index in (self.INDEX_NODE_ID, self.INDEX_EDGE_SOURCE, self.INDEX_EDGE_TARGET):
            if ("index", index) in existing:
                status["indexes"].append(index)
            else:
                status["issues"].append(f"Index {index} not found")

        status["initialized"] = not status["issues"]

        self.logger.debug(
            "schema_verified",
            initialized=status["initialized"],
            issues_count=len(status["issues"]),
        )
        return status

    async def drop_all(self) -> None:
        """
        Drop both tables and their indexes (DANGEROUS - testing only).

        Raises:
            SchemaError: If a DROP statement fails
        """
        self.logger.warning("dropping_all_tables")

        for statement in (
            f"DROP TABLE IF EXISTS {self.TABLE_EDGES}",
            f"DROP TABLE IF EXISTS {self.TABLE_NODES}",
        ):
            await self._execute_ddl(statement)

        self.initialized = False
        self.logger.info("all_tables_dropped")

    async def _execute_ddl(self, statement: str) -> None:
        """
        Execute one DDL statement with error translation.

        Raises:
            SchemaError: If execution fails
        """
        try:
            await self.connection.execute(statement)
        except aiosqlite.Error as e:
            self.logger.error("schema_statement_failed", error=str(e))
            raise SchemaError(f"Schema statement failed: {e}") from e
