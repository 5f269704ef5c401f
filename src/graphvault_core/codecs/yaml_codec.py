"""
YAML codec - same structure as JSON with YAML surface syntax.

Author: GraphVault contributors
License: MIT
"""

from typing import Any, Dict

import yaml

from graphvault_core.codecs.base import GraphCodec
from graphvault_core.exceptions import CodecSyntaxError
from graphvault_core.models import Graph


class YAMLCodec(GraphCodec):
    """Encode/decode graphs as YAML documents using PyYAML safe loaders."""

    format_name = "yaml"
    extensions = (".yaml", ".yml")

    def parse(self, data: bytes, source: str = "<bytes>") -> Dict[str, Any]:
        text = self.decode_text(data, source)
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as e:
            details: Dict[str, Any] = {"source": source}
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                details["line"] = mark.line + 1
                details["column"] = mark.column + 1
            raise CodecSyntaxError(
                f"Invalid YAML in {source}: {e}",
                details=details,
                original_exception=e,
            ) from e

        # An empty document loads as None.
        return loaded if loaded is not None else {}

    def encode(self, graph: Graph) -> bytes:
        text = yaml.safe_dump(
            graph.to_dict(),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
        return text.encode("utf-8")
