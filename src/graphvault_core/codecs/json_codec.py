"""
JSON codec - 1:1 structural mapping of the graph model.

Author: GraphVault contributors
License: MIT
"""

import json
from typing import Any, Dict

from graphvault_core.codecs.base import GraphCodec
from graphvault_core.exceptions import CodecSyntaxError
from graphvault_core.models import Graph


class JSONCodec(GraphCodec):
    """
    Encode/decode graphs as ``{"nodes": [...], "edges": [...]}`` JSON.

    Extra node fields are preserved. Edge labels are always written as
    lists; on input a bare string label is accepted and normalized by
    validation.
    """

    format_name = "json"
    extensions = (".json",)

    def parse(self, data: bytes, source: str = "<bytes>") -> Dict[str, Any]:
        text = self.decode_text(data, source)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CodecSyntaxError(
                f"Invalid JSON in {source}: {e.msg} (line {e.lineno}, column {e.colno})",
                details={"source": source, "line": e.lineno, "column": e.colno},
                original_exception=e,
            ) from e

    def encode(self, graph: Graph) -> bytes:
        indent = 2 if self.pretty_print else None
        return json.dumps(graph.to_dict(), indent=indent, ensure_ascii=False).encode("utf-8")
