"""
Unit tests for YAMLCodec.
"""

import pytest
import yaml

from graphvault_core.codecs import JSONCodec, YAMLCodec
from graphvault_core.exceptions import CodecSyntaxError, StructureError

YAML_GRAPH = b"""
nodes:
  - id: c1
    label: A claim
    type: claim
  - id: 2
    label: Numbered node
edges:
  - source: 2
    target: c1
    label: supports
"""


@pytest.fixture
def codec():
    return YAMLCodec()


def test_decode_document(codec):
    graph = codec.decode(YAML_GRAPH)

    assert graph.node_count == 2
    assert graph.get_node("2").type == "node"
    assert graph.edges[0].label == ["supports"]
    assert graph.edges[0].source == "2"


def test_matches_json_decode(codec, example_graph_path, example_graph_payload):
    yaml_graph = codec.decode(yaml.safe_dump(example_graph_payload).encode("utf-8"))
    json_graph = JSONCodec().decode(example_graph_path.read_bytes())

    assert yaml_graph.to_dict() == json_graph.to_dict()


def test_dates_in_extra_fields(codec):
    data = b"nodes:\n  - id: a\n    label: A\n    created: 2024-01-01\nedges: []\n"

    graph = codec.decode(data)

    assert graph.get_node("a").extra_fields == {"created": "2024-01-01"}


def test_boolean_id_rejected(codec):
    data = b"nodes:\n  - id: yes\n    label: Ambiguous\nedges: []\n"

    with pytest.raises(StructureError) as exc_info:
        codec.decode(data)

    assert exc_info.value.error_code == "STRUCT_002"


def test_malformed_yaml(codec):
    with pytest.raises(CodecSyntaxError) as exc_info:
        codec.parse(b"nodes: [a, b\nedges: ]", source="bad.yaml")

    assert exc_info.value.error_code == "CODEC_001"
    assert exc_info.value.details["source"] == "bad.yaml"
    assert "line" in exc_info.value.details


def test_empty_document(codec):
    assert codec.parse(b"") == {}

    with pytest.raises(StructureError, match='"nodes" array'):
        codec.decode(b"")


def test_unsafe_tags_rejected(codec):
    with pytest.raises(CodecSyntaxError):
        codec.parse(b"!!python/object/apply:os.system ['echo hi']")


def test_encode_preserves_key_order(codec, sample_graph):
    text = codec.encode(sample_graph).decode("utf-8")

    assert text.index("nodes:") < text.index("edges:")
    assert text.index("id: e1") < text.index("label: Cats purr") < text.index("weight: 0.8")
    assert yaml.safe_load(text) == sample_graph.to_dict()
