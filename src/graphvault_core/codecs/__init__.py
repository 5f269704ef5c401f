"""
Graph codecs for GraphVault.

Each codec converts between the graph model and one interchange format.
"""

from graphvault_core.codecs.base import GraphCodec
from graphvault_core.codecs.codec_factory import get_codec, supported_formats
from graphvault_core.codecs.csv_codec import (
    CSVCodec,
    CsvTables,
    derive_csv_paths,
    join_labels,
    split_labels,
)
from graphvault_core.codecs.json_codec import JSONCodec
from graphvault_core.codecs.xml_codec import XMLCodec
from graphvault_core.codecs.yaml_codec import YAMLCodec

__all__ = [
    "GraphCodec",
    "JSONCodec",
    "CSVCodec",
    "CsvTables",
    "XMLCodec",
    "YAMLCodec",
    "get_codec",
    "supported_formats",
    "derive_csv_paths",
    "join_labels",
    "split_labels",
]
