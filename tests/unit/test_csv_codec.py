"""
Unit tests for CSVCodec.

Tests cover:
- Base name to file pair derivation
- Table parsing (BOM, blank rows, missing columns, custom delimiter)
- Label flattening on export
- File read/write of the node/edge pair
"""

from pathlib import Path

import pytest

from graphvault_core.codecs.csv_codec import (
    CSVCodec,
    CsvTables,
    derive_csv_paths,
    join_labels,
    split_labels,
)
from graphvault_core.exceptions import CodecSyntaxError, NotFoundError, StructureError

NODES_CSV = b"id,label,type\nc1,A claim,claim\ne1,Some evidence,evidence\nn1,Untyped,\n"
EDGES_CSV = b"source,target,label\ne1,c1,supports\n"


@pytest.fixture
def codec():
    return CSVCodec()


class TestPathDerivation:
    @pytest.mark.parametrize("base", ["graph.csv", "graph"])
    def test_csv_suffix_stripped(self, base):
        assert derive_csv_paths(base) == [Path("graph_nodes.csv"), Path("graph_edges.csv")]

    def test_directories_kept(self):
        nodes, edges = derive_csv_paths(Path("out/data.csv"))

        assert nodes == Path("out/data_nodes.csv")
        assert edges == Path("out/data_edges.csv")

    def test_other_extension_kept(self):
        assert derive_csv_paths("graph.txt")[0] == Path("graph.txt_nodes.csv")


class TestLabels:
    def test_join_labels(self):
        assert join_labels(["supports", "cites"]) == "supports,cites"

    def test_split_labels_is_single_label(self):
        assert split_labels("supports,cites") == ["supports,cites"]


class TestCSVParse:
    def test_parse_tables(self, codec):
        graph = codec.decode(CsvTables(nodes=NODES_CSV, edges=EDGES_CSV))

        assert graph.node_count == 3
        assert graph.get_node("n1").type == "node"
        assert graph.edges[0].label == ["supports"]

    def test_bom_and_crlf(self, codec):
        nodes = b"\xef\xbb\xbfid,label,type\r\nc1,Claim,claim\r\n"

        raw = codec.parse_tables(nodes, b"source,target,label\r\n")

        assert raw["nodes"] == [{"id": "c1", "label": "Claim", "type": "claim"}]
        assert raw["edges"] == []

    def test_blank_rows_skipped(self, codec):
        raw = codec.parse_tables(b"id,label\n\nc1,Claim\n,\n", EDGES_CSV)

        assert [n["id"] for n in raw["nodes"]] == ["c1"]

    def test_quoted_cells(self, codec):
        raw = codec.parse_tables(
            b'id,label,type\nc1,"Cats, dogs and ""quotes""",claim\n', EDGES_CSV
        )

        assert raw["nodes"][0]["label"] == 'Cats, dogs and "quotes"'

    def test_empty_edge_label_is_missing(self, codec):
        with pytest.raises(StructureError, match="missing required 'label'"):
            codec.decode(CsvTables(nodes=NODES_CSV, edges=b"source,target,label\ne1,c1,\n"))

    def test_missing_node_columns(self, codec):
        with pytest.raises(CodecSyntaxError) as exc_info:
            codec.parse_tables(b"id,name\nc1,Claim\n", EDGES_CSV)

        error = exc_info.value
        assert error.error_code == "CODEC_002"
        assert error.details == {"source": "<nodes>", "missing_columns": ["label"]}

    def test_empty_edges_table(self, codec):
        with pytest.raises(CodecSyntaxError) as exc_info:
            codec.parse_tables(NODES_CSV, b"")

        assert exc_info.value.details["source"] == "<edges>"

    def test_source_names_derived_from_base(self, codec):
        with pytest.raises(CodecSyntaxError) as exc_info:
            codec.parse_tables(NODES_CSV, b"from,to\n", source="data/graph.csv")

        assert exc_info.value.details["source"] == str(Path("data/graph_edges.csv"))

    def test_custom_delimiter(self):
        codec = CSVCodec(delimiter=";")

        raw = codec.parse_tables(b"id;label;type\nc1;A, B;claim\n", b"source;target;label\n")

        assert raw["nodes"][0]["label"] == "A, B"


class TestCSVEncode:
    def test_encode_tables(self, codec, sample_graph):
        tables = codec.encode(sample_graph)

        assert tables.nodes.decode("utf-8").splitlines() == [
            "id,label,type",
            "c1,Cats are better than dogs,claim",
            "e1,Cats purr,evidence",
            "e2,Dogs bark at night,evidence",
        ]
        assert tables.edges.decode("utf-8").splitlines() == [
            "source,target,label",
            "e1,c1,supports",
            'e2,c1,"supports,cites"',
        ]

    def test_multi_label_flattened_on_reimport(self, codec, sample_graph):
        graph = codec.decode(codec.encode(sample_graph))

        assert [e.label for e in graph.edges] == [["supports"], ["supports,cites"]]

    def test_write_and_read_pair(self, codec, sample_graph, tmp_path):
        written = codec.write(sample_graph, tmp_path / "graph.csv")

        assert written == [tmp_path / "graph_nodes.csv", tmp_path / "graph_edges.csv"]
        assert all(path.is_file() for path in written)

        raw = codec.read(tmp_path / "graph")
        assert len(raw["nodes"]) == 3
        assert len(raw["edges"]) == 2

    def test_read_missing_edges_file(self, codec, tmp_path):
        (tmp_path / "graph_nodes.csv").write_bytes(NODES_CSV)

        with pytest.raises(NotFoundError) as exc_info:
            codec.read(tmp_path / "graph.csv")

        assert exc_info.value.details["path"] == str(tmp_path / "graph_edges.csv")
