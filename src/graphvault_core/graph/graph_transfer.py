"""
GraphTransfer - Import graphs into a store and export them back out.

Import:  file(s) -> codec.read -> validate_graph -> store.upsert_graph
Export:  store.read_graph -> codec.write -> file(s)

Supports JSON, CSV (node/edge file pair), XML and YAML.

Author: GraphVault contributors
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import structlog

from graphvault_core.codecs import GraphCodec, get_codec
from graphvault_core.config import GraphVaultSettings
from graphvault_core.exceptions import (
    ExportError,
    GraphVaultError,
    NotFoundError,
    StorageError,
    StructureError,
)
from graphvault_core.models import Graph
from graphvault_core.validation import validate_graph
from graphvault_db import SQLiteGraphStore
from graphvault_db import exceptions as db_exceptions

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

# Storage exception type -> core error code
STORAGE_ERROR_CODES = {
    db_exceptions.ConnectionError: "DB_001",
    db_exceptions.SchemaError: "DB_002",
    db_exceptions.TransactionError: "DB_003",
}


# ============================================================================
# Data Models
# ============================================================================


@dataclass
class ImportResult:
    """
    Result of a graph import.

    Attributes:
        format: Format tag used
        input_paths: Files read
        nodes_count: Distinct nodes in the imported graph
        edges_count: Distinct edges in the imported graph
        dangling_edges_count: Edges whose endpoints are unknown node ids
        import_time_ms: Duration in milliseconds
    """

    format: str
    input_paths: List[str]
    nodes_count: int
    edges_count: int
    dangling_edges_count: int
    import_time_ms: float


@dataclass
class ExportResult:
    """
    Result of a graph export.

    Attributes:
        format: Format tag used
        output_paths: Files written
        nodes_count: Number of nodes exported
        edges_count: Number of edges exported
        file_size_bytes: Total size of written files
        export_time_ms: Duration in milliseconds
    """

    format: str
    output_paths: List[str]
    nodes_count: int
    edges_count: int
    file_size_bytes: int
    export_time_ms: float


# ============================================================================
# GraphTransfer Class
# ============================================================================


class GraphTransfer:
    """
    Drive imports into and exports out of a SQLiteGraphStore.

    The store must already be open; GraphTransfer never opens or closes it.
    Settings are passed in explicitly.

    Example:
        >>> settings = GraphVaultSettings(database_path="arguing.sqlite")
        >>> async with SQLiteGraphStore(settings.database_path) as store:
        ...     transfer = GraphTransfer(store=store, settings=settings)
        ...     result = await transfer.import_graph("json", "graph.json")
        ...     print(f"Imported {result.nodes_count} nodes, {result.edges_count} edges")
        ...     await transfer.export_graph("csv", "graph.csv")
    """

    def __init__(
        self, store: SQLiteGraphStore, settings: Optional[GraphVaultSettings] = None
    ) -> None:
        """
        Initialize GraphTransfer.

        Args:
            store: Open SQLiteGraphStore
            settings: Explicit settings (defaults to GraphVaultSettings defaults)

        Raises:
            ValueError: If store is None
            TypeError: If store is not a SQLiteGraphStore instance
        """
        if store is None:
            raise ValueError("store cannot be None")

        if not isinstance(store, SQLiteGraphStore):
            raise TypeError(f"store must be SQLiteGraphStore, got {type(store).__name__}")

        self.store = store
        self.settings = settings or GraphVaultSettings.model_construct()
        self.logger = logger.bind(component="graph_transfer")

    def codec_for(self, format_name: str) -> GraphCodec:
        """
        Return the codec for a format tag configured from settings.

        Raises:
            UnknownFormatError: If the tag has no codec
        """
        return get_codec(
            format_name,
            pretty_print=self.settings.pretty_print,
            csv_delimiter=self.settings.csv_delimiter,
        )

    async def import_graph(self, format_name: str, input_path: PathLike) -> ImportResult:
        """
        Decode a file, validate it and upsert it into the store.

        Args:
            format_name: Format tag (json, csv, xml, yaml)
            input_path: Input file (for CSV, the base name of the file pair)

        Returns:
            ImportResult with counts of the validated graph

        Raises:
            UnknownFormatError: If the format tag has no codec
            NotFoundError: If an input file does not exist
            CodecSyntaxError: If a file is malformed
            StructureError: If the payload is not a valid graph, or an edge
                dangles while strict_edges is enabled
            StorageError: If the write fails (nothing is committed)
        """
        start_time = datetime.now(timezone.utc)
        codec = self.codec_for(format_name)
        input_paths = [str(p) for p in codec.resolve_paths(input_path)]

        self.logger.debug("import_started", format=codec.format_name, input_paths=input_paths)

        raw = codec.read(input_path)
        graph = validate_graph(raw)

        dangling = await self._check_dangling_edges(graph)

        try:
            await self.store.upsert_graph(graph)
        except db_exceptions.StorageError as e:
            raise self._wrap_storage_error(e, "import") from e

        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

        self.logger.info(
            "graph_imported",
            format=codec.format_name,
            nodes=graph.node_count,
            edges=graph.edge_count,
            dangling_edges=dangling,
        )

        return ImportResult(
            format=codec.format_name,
            input_paths=input_paths,
            nodes_count=graph.node_count,
            edges_count=graph.edge_count,
            dangling_edges_count=dangling,
            import_time_ms=round(elapsed, 2),
        )

    async def export_graph(self, format_name: str, output_path: PathLike) -> ExportResult:
        """
        Read the stored graph and encode it to a file.

        Args:
            format_name: Format tag (json, csv, xml, yaml)
            output_path: Output file (for CSV, the base name of the file pair)

        Returns:
            ExportResult with export statistics

        Raises:
            UnknownFormatError: If the format tag has no codec
            NotFoundError: If the output directory does not exist
            StorageError: If the store cannot be read
            ExportError: If encoding or writing fails
        """
        start_time = datetime.now(timezone.utc)
        codec = self.codec_for(format_name)
        paths = codec.resolve_paths(output_path)
        self._validate_output_paths(paths)

        try:
            graph = await self.store.read_graph()
        except db_exceptions.StorageError as e:
            raise self._wrap_storage_error(e, "export") from e

        try:
            written = codec.write(graph, output_path)
        except GraphVaultError:
            raise
        except Exception as e:
            raise ExportError(
                message=f"{codec.format_name.upper()} export failed: {e}",
                details={"format": codec.format_name, "output_path": str(output_path)},
                original_exception=e,
            ) from e

        file_size = sum(path.stat().st_size for path in written)
        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

        self.logger.info(
            "graph_exported",
            format=codec.format_name,
            nodes=graph.node_count,
            edges=graph.edge_count,
            file_size_kb=round(file_size / 1024, 2),
        )

        return ExportResult(
            format=codec.format_name,
            output_paths=[str(path) for path in written],
            nodes_count=graph.node_count,
            edges_count=graph.edge_count,
            file_size_bytes=file_size,
            export_time_ms=round(elapsed, 2),
        )

    # ========================================================================
    # Private Helper Methods
    # ========================================================================

    async def _check_dangling_edges(self, graph: Graph) -> int:
        """
        Apply the dangling-edge policy.

        Endpoints count as known when they are nodes of the imported graph or
        already stored. Permissive mode logs a warning; strict mode raises.

        Returns:
            Number of dangling edges

        Raises:
            StructureError: In strict mode, if any edge dangles
        """
        if graph.edge_count == 0:
            return 0

        try:
            stored_ids = await self.store.node_ids()
        except db_exceptions.StorageError as e:
            raise self._wrap_storage_error(e, "import") from e

        dangling = graph.dangling_edges(known_ids=stored_ids)
        if not dangling:
            return 0

        sample = [f"{e.source}->{e.target}" for e in dangling[:5]]

        if self.settings.strict_edges:
            raise StructureError(
                f"{len(dangling)} edge(s) reference unknown node ids: {', '.join(sample)}",
                error_code="STRUCT_004",
                details={
                    "collection": "edges",
                    "field": "source/target",
                    "index": None,
                    "dangling_edges": len(dangling),
                    "sample": sample,
                },
            )

        self.logger.warning("dangling_edges_detected", count=len(dangling), sample=sample)
        return len(dangling)

    def _validate_output_paths(self, paths: List[Path]) -> None:
        """
        Check every output file's parent directory exists.

        Raises:
            NotFoundError: If a parent directory is missing
        """
        for path in paths:
            parent = path.expanduser().resolve().parent
            if not parent.is_dir():
                raise NotFoundError(
                    f"Output directory does not exist: {parent}",
                    error_code="IO_002",
                    details={"path": str(path)},
                )

    def _wrap_storage_error(self, error: db_exceptions.StorageError, operation: str) -> StorageError:
        self.logger.error("storage_failed", operation=operation, error=str(error))
        return StorageError(
            message=f"Storage {operation} failed: {error}",
            error_code=STORAGE_ERROR_CODES.get(type(error), "DB_001"),
            details={"operation": operation, "database": self.store.database_path},
            original_exception=error,
        )
