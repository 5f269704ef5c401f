"""
Unit tests for GraphTransfer.

Tests cover:
- Initialization and validation
- Import pipeline (counts, dangling edge policy, error propagation)
- Export pipeline (file pairs, output path validation, error wrapping)
- Storage error translation
"""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
import pytest_asyncio

from graphvault_core.codecs import JSONCodec, supported_formats
from graphvault_core.config import GraphVaultSettings
from graphvault_core.exceptions import (
    CodecSyntaxError,
    ExportError,
    NotFoundError,
    StorageError,
    StructureError,
    UnknownFormatError,
)
from graphvault_core.graph import ExportResult, GraphTransfer, ImportResult
from graphvault_db import SQLiteGraphStore
from graphvault_db.exceptions import ConnectionError, TransactionError

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def store():
    async with SQLiteGraphStore(":memory:") as opened:
        yield opened


@pytest.fixture
def transfer(store):
    return GraphTransfer(store=store)


@pytest.fixture
def mock_store():
    """Create mock SQLiteGraphStore."""
    store = Mock(spec=SQLiteGraphStore)
    store.database_path = ":memory:"
    store.node_ids = AsyncMock(return_value=set())
    store.upsert_graph = AsyncMock(return_value=(0, 0))
    store.read_graph = AsyncMock()
    return store


def _write_json(path, nodes, edges):
    path.write_text(json.dumps({"nodes": nodes, "edges": edges}), encoding="utf-8")
    return path


# ============================================================================
# Initialization Tests
# ============================================================================


class TestInit:
    def test_none_store(self):
        with pytest.raises(ValueError, match="store cannot be None"):
            GraphTransfer(store=None)

    def test_wrong_store_type(self):
        with pytest.raises(TypeError, match="SQLiteGraphStore"):
            GraphTransfer(store=object())

    def test_default_settings(self, mock_store):
        transfer = GraphTransfer(store=mock_store)

        assert transfer.settings.strict_edges is False
        assert transfer.settings.csv_delimiter == ","

    def test_codec_uses_settings(self, mock_store):
        settings = GraphVaultSettings(csv_delimiter=";", pretty_print=False)
        transfer = GraphTransfer(store=mock_store, settings=settings)

        codec = transfer.codec_for("CSV")

        assert codec.delimiter == ";"
        assert codec.pretty_print is False


# ============================================================================
# Import Tests
# ============================================================================


class TestImport:
    @pytest.mark.asyncio
    async def test_import_example(self, transfer, store, example_graph_path):
        result = await transfer.import_graph("json", example_graph_path)

        assert isinstance(result, ImportResult)
        assert result.format == "json"
        assert result.input_paths == [str(example_graph_path)]
        assert result.nodes_count == 9
        assert result.edges_count == 6
        assert result.dangling_edges_count == 0
        assert result.import_time_ms >= 0

        stats = await store.get_stats()
        assert (stats["nodes"], stats["edges"]) == (9, 6)

    @pytest.mark.asyncio
    async def test_counts_are_deduplicated(self, transfer, tmp_path):
        edge = {"source": "a", "target": "a", "label": "self"}
        path = _write_json(
            tmp_path / "dup.json",
            [{"id": "a", "label": "A"}, {"id": "a", "label": "A again"}],
            [edge, edge],
        )

        result = await transfer.import_graph("json", path)

        assert (result.nodes_count, result.edges_count) == (1, 1)

    @pytest.mark.asyncio
    async def test_dangling_edges_permissive(self, transfer, store, tmp_path):
        path = _write_json(
            tmp_path / "g.json",
            [{"id": "a", "label": "A"}],
            [{"source": "a", "target": "ghost", "label": "points"}],
        )

        result = await transfer.import_graph("json", path)

        assert result.dangling_edges_count == 1
        assert (await store.get_stats())["edges"] == 1

    @pytest.mark.asyncio
    async def test_dangling_edges_strict(self, store, tmp_path):
        transfer = GraphTransfer(store=store, settings=GraphVaultSettings(strict_edges=True))
        path = _write_json(
            tmp_path / "g.json",
            [{"id": "a", "label": "A"}],
            [{"source": "a", "target": "ghost", "label": "points"}],
        )

        with pytest.raises(StructureError) as exc_info:
            await transfer.import_graph("json", path)

        assert exc_info.value.error_code == "STRUCT_004"
        assert exc_info.value.details["sample"] == ["a->ghost"]
        assert (await store.get_stats())["nodes"] == 0

    @pytest.mark.asyncio
    async def test_strict_accepts_stored_endpoints(self, store, tmp_path):
        transfer = GraphTransfer(store=store, settings=GraphVaultSettings(strict_edges=True))
        nodes = _write_json(tmp_path / "nodes.json", [{"id": "a", "label": "A"}], [])
        edges = _write_json(
            tmp_path / "edges.json", [], [{"source": "a", "target": "a", "label": "self"}]
        )

        await transfer.import_graph("json", nodes)
        result = await transfer.import_graph("json", edges)

        assert result.dangling_edges_count == 0

    @pytest.mark.asyncio
    async def test_invalid_input_writes_nothing(self, transfer, store, tmp_path):
        path = _write_json(
            tmp_path / "bad.json",
            [{"id": "a", "label": "A"}],
            [{"source": "a", "target": "a"}],
        )

        with pytest.raises(StructureError, match="Edge at index 0"):
            await transfer.import_graph("json", path)

        assert (await store.get_stats())["nodes"] == 0

    @pytest.mark.asyncio
    async def test_empty_label_entry_rejected(self, transfer, store, tmp_path):
        path = _write_json(
            tmp_path / "g.json",
            [{"id": "a", "label": "A"}],
            [{"source": "a", "target": "a", "label": [""]}],
        )

        with pytest.raises(StructureError) as exc_info:
            await transfer.import_graph("json", path)

        assert exc_info.value.error_code == "STRUCT_003"
        assert (await store.get_stats())["edges"] == 0

    @pytest.mark.asyncio
    async def test_yaml_dates_stored_as_text(self, transfer, store, tmp_path):
        path = tmp_path / "g.yaml"
        path.write_text("nodes:\n  - id: a\n    label: A\n    created: 2024-01-01\nedges: []\n")

        result = await transfer.import_graph("yaml", path)

        assert result.nodes_count == 1
        assert (await store.get_node("a")).extra_fields == {"created": "2024-01-01"}

    @pytest.mark.asyncio
    async def test_missing_file(self, transfer, tmp_path):
        with pytest.raises(NotFoundError):
            await transfer.import_graph("json", tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_malformed_file(self, transfer, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_bytes(b"<graph>")

        with pytest.raises(CodecSyntaxError):
            await transfer.import_graph("xml", path)

    @pytest.mark.asyncio
    async def test_unknown_format(self, transfer, example_graph_path):
        with pytest.raises(UnknownFormatError):
            await transfer.import_graph("graphml", example_graph_path)

    @pytest.mark.asyncio
    async def test_csv_input_paths(self, transfer, tmp_path):
        (tmp_path / "g_nodes.csv").write_text("id,label\na,A\n")
        (tmp_path / "g_edges.csv").write_text("source,target,label\na,a,self\n")

        result = await transfer.import_graph("csv", tmp_path / "g.csv")

        assert result.input_paths == [str(tmp_path / "g_nodes.csv"), str(tmp_path / "g_edges.csv")]
        assert (result.nodes_count, result.edges_count) == (1, 1)

    @pytest.mark.asyncio
    async def test_transaction_error_wrapped(self, mock_store, example_graph_path):
        mock_store.upsert_graph.side_effect = TransactionError("disk I/O error")
        transfer = GraphTransfer(store=mock_store)

        with pytest.raises(StorageError) as exc_info:
            await transfer.import_graph("json", example_graph_path)

        error = exc_info.value
        assert error.error_code == "DB_003"
        assert isinstance(error.original_exception, TransactionError)
        assert error.details == {"operation": "import", "database": ":memory:"}

    @pytest.mark.asyncio
    async def test_closed_store_wrapped(self, mock_store, example_graph_path):
        mock_store.node_ids.side_effect = ConnectionError("Store has been closed.")
        transfer = GraphTransfer(store=mock_store)

        with pytest.raises(StorageError) as exc_info:
            await transfer.import_graph("json", example_graph_path)

        assert exc_info.value.error_code == "DB_001"
        mock_store.upsert_graph.assert_not_called()


# ============================================================================
# Export Tests
# ============================================================================


class TestExport:
    @pytest.mark.asyncio
    async def test_export_json(self, transfer, store, sample_graph, tmp_path):
        await store.upsert_graph(sample_graph)
        output = tmp_path / "out.json"

        result = await transfer.export_graph("json", output)

        assert isinstance(result, ExportResult)
        assert result.output_paths == [str(output)]
        assert (result.nodes_count, result.edges_count) == (3, 2)
        assert result.file_size_bytes == output.stat().st_size
        assert json.loads(output.read_text(encoding="utf-8")) == sample_graph.to_dict()

    @pytest.mark.asyncio
    async def test_export_csv_pair(self, transfer, store, sample_graph, tmp_path):
        await store.upsert_graph(sample_graph)

        result = await transfer.export_graph("csv", tmp_path / "out.csv")

        nodes_path, edges_path = tmp_path / "out_nodes.csv", tmp_path / "out_edges.csv"
        assert result.output_paths == [str(nodes_path), str(edges_path)]
        assert result.file_size_bytes == nodes_path.stat().st_size + edges_path.stat().st_size

    @pytest.mark.asyncio
    @pytest.mark.parametrize("format_name", supported_formats())
    async def test_export_empty_store(self, transfer, tmp_path, format_name):
        output = tmp_path / f"empty.{format_name}"

        result = await transfer.export_graph(format_name, output)

        assert (result.nodes_count, result.edges_count) == (0, 0)
        assert result.file_size_bytes > 0

        async with SQLiteGraphStore(":memory:") as fresh:
            reimported = await GraphTransfer(store=fresh).import_graph(format_name, output)
            stats = await fresh.get_stats()

        assert (reimported.nodes_count, reimported.edges_count) == (0, 0)
        assert (stats["nodes"], stats["edges"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_missing_output_directory(self, transfer, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            await transfer.export_graph("json", tmp_path / "nope" / "out.json")

        assert exc_info.value.error_code == "IO_002"

    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self, transfer, tmp_path):
        with patch.object(JSONCodec, "write", side_effect=OSError("disk full")):
            with pytest.raises(ExportError) as exc_info:
                await transfer.export_graph("json", tmp_path / "out.json")

        assert exc_info.value.error_code == "EXP_001"
        assert "disk full" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self, mock_store, tmp_path):
        mock_store.read_graph.side_effect = TransactionError("Failed to read graph")
        transfer = GraphTransfer(store=mock_store)

        with pytest.raises(StorageError) as exc_info:
            await transfer.export_graph("json", tmp_path / "out.json")

        assert exc_info.value.error_code == "DB_003"
        assert exc_info.value.details["operation"] == "export"
