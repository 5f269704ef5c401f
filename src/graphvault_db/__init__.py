"""
graphvault_db - Storage layer for GraphVault.

Provides the canonical graph model and an async SQLite store with an
idempotent two-table schema.

Author: GraphVault contributors
License: MIT
"""

from graphvault_db.exceptions import (
    ConnectionError,
    SchemaError,
    StorageError,
    TransactionError,
)
from graphvault_db.models import DEFAULT_NODE_TYPE, Edge, Graph, Node, serialize_labels
from graphvault_db.schema_manager import SchemaManager
from graphvault_db.sqlite_client import SQLiteGraphStore

__all__ = [
    "SQLiteGraphStore",
    "SchemaManager",
    "Node",
    "Edge",
    "Graph",
    "DEFAULT_NODE_TYPE",
    "serialize_labels",
    "StorageError",
    "ConnectionError",
    "SchemaError",
    "TransactionError",
]
