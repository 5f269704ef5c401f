"""
GraphVault CLI commands.

Each command opens the store for the duration of the call, runs one
import/export pipeline and returns a process exit code.
"""

import sys
import uuid
from pathlib import Path

from graphvault_core.config import GraphVaultSettings
from graphvault_core.exceptions import GraphVaultError
from graphvault_core.graph import GraphTransfer
from graphvault_core.logging_service import LoggingService
from graphvault_db import SQLiteGraphStore
from graphvault_db.exceptions import StorageError as DBStorageError


async def import_command(settings: GraphVaultSettings, format_name: str, input_path: Path) -> int:
    """
    Import a graph file into the configured store.

    Returns:
        0 on success, 1 on any failure
    """
    correlation_id = str(uuid.uuid4())
    try:
        async with SQLiteGraphStore(settings.database_path) as store:
            transfer = GraphTransfer(store=store, settings=settings)
            result = await transfer.import_graph(format_name, input_path)
    except (GraphVaultError, DBStorageError) as e:
        return _fail(e, correlation_id, "import", input_path)

    LoggingService.log_operation(
        "import_graph",
        correlation_id,
        metadata={"format": result.format, "duration_ms": result.import_time_ms},
        logger_name="graphvault.cli",
    )
    print(
        f"Imported {result.nodes_count} nodes and {result.edges_count} edges "
        f"from {', '.join(result.input_paths)}."
    )
    if result.dangling_edges_count:
        print(f"Warning: {result.dangling_edges_count} edge(s) reference unknown nodes.")
    return 0


async def export_command(settings: GraphVaultSettings, format_name: str, output_path: Path) -> int:
    """
    Export the stored graph to a file.

    Returns:
        0 on success, 1 on any failure
    """
    correlation_id = str(uuid.uuid4())
    try:
        async with SQLiteGraphStore(settings.database_path) as store:
            transfer = GraphTransfer(store=store, settings=settings)
            result = await transfer.export_graph(format_name, output_path)
    except (GraphVaultError, DBStorageError) as e:
        return _fail(e, correlation_id, "export", output_path)

    LoggingService.log_operation(
        "export_graph",
        correlation_id,
        metadata={"format": result.format, "duration_ms": result.export_time_ms},
        logger_name="graphvault.cli",
    )
    print(
        f"Exported {result.nodes_count} nodes and {result.edges_count} edges "
        f"to {', '.join(result.output_paths)}."
    )
    return 0


async def stats_command(settings: GraphVaultSettings) -> int:
    """Print node, edge and dangling-edge counts of the store."""
    correlation_id = str(uuid.uuid4())
    try:
        async with SQLiteGraphStore(settings.database_path) as store:
            stats = await store.get_stats()
    except DBStorageError as e:
        return _fail(e, correlation_id, "stats", settings.database_path)

    print(f"Database: {stats['database_path']}")
    print(f"Nodes: {stats['nodes']}")
    print(f"Edges: {stats['edges']}")
    print(f"Dangling edges: {stats['dangling_edges']}")
    return 0


def _fail(error: Exception, correlation_id: str, operation: str, path: object) -> int:
    LoggingService.log_error(
        error,
        correlation_id,
        context={"operation": operation, "path": str(path)},
        logger_name="graphvault.cli",
    )
    print(f"Error: {error}", file=sys.stderr)
    return 1
