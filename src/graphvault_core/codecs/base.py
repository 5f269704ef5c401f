"""
GraphCodec - Abstract base for format-specific graph encoders/decoders.

A codec turns bytes into a raw payload (parse), raw payloads into a Graph
(decode, via validation) and a Graph back into bytes (encode). File access
goes through read()/write() so codecs that span several files (CSV) can
derive their own file names.

Author: GraphVault contributors
License: MIT
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import structlog

from graphvault_core.exceptions import CodecSyntaxError, NotFoundError
from graphvault_core.models import Graph
from graphvault_core.validation import validate_graph

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


class GraphCodec(ABC):
    """
    Symmetric encode/decode pair for one interchange format.

    Subclasses set ``format_name`` and ``extensions`` and implement
    ``parse`` and ``encode``. Single-document formats get ``read``/``write``
    for free.

    Attributes:
        format_name: Format tag used by the codec factory (e.g. "json")
        extensions: File extensions conventionally used for the format
        pretty_print: Indent output where the format supports it
    """

    format_name: str = ""
    extensions: Tuple[str, ...] = ()

    def __init__(self, pretty_print: bool = True) -> None:
        self.pretty_print = pretty_print
        self.logger = logger.bind(codec=self.format_name)

    @abstractmethod
    def parse(self, data: bytes, source: str = "<bytes>") -> Dict[str, Any]:
        """
        Parse bytes into a raw, unvalidated payload.

        Raises:
            CodecSyntaxError: If the bytes are not valid for this format
        """

    @abstractmethod
    def encode(self, graph: Graph) -> Any:
        """Encode a graph into this format's byte representation."""

    def decode(self, data: bytes, source: str = "<bytes>") -> Graph:
        """
        Parse and validate bytes into a Graph.

        Raises:
            CodecSyntaxError: If the bytes are malformed
            StructureError: If the document does not describe a graph
        """
        return validate_graph(self.parse(data, source))

    def resolve_paths(self, path: PathLike) -> List[Path]:
        """Files addressed by ``path`` for this format."""
        return [Path(path)]

    def read(self, path: PathLike) -> Dict[str, Any]:
        """
        Read and parse the file(s) at ``path`` into a raw payload.

        Raises:
            NotFoundError: If a file does not exist
            CodecSyntaxError: If a file is malformed
        """
        (file_path,) = self.resolve_paths(path)
        return self.parse(read_bytes(file_path), source=str(file_path))

    def write(self, graph: Graph, path: PathLike) -> List[Path]:
        """
        Encode ``graph`` and write it to the file(s) addressed by ``path``.

        Returns:
            Paths written
        """
        (file_path,) = self.resolve_paths(path)
        file_path.write_bytes(self.encode(graph))
        return [file_path]

    @staticmethod
    def decode_text(data: bytes, source: str) -> str:
        """
        Decode UTF-8 bytes, tolerating a byte order mark.

        Raises:
            CodecSyntaxError: If the bytes are not valid UTF-8
        """
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CodecSyntaxError(
                f"{source} is not valid UTF-8: {e}",
                error_code="CODEC_003",
                details={"source": source},
                original_exception=e,
            ) from e


def read_bytes(path: Path) -> bytes:
    """
    Read a whole file.

    Raises:
        NotFoundError: If the file does not exist
    """
    if not path.is_file():
        raise NotFoundError(
            f"Input file not found: {path}",
            error_code="IO_001",
            details={"path": str(path)},
        )
    return path.read_bytes()
