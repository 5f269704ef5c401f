"""
GraphVault Core Layer.

Middle layer in dependency hierarchy. Contains:
- Graph validation
- Format codecs (JSON, CSV, XML, YAML)
- Import/export orchestration
- Exception hierarchy
- Configuration management
- Logging service

Author: GraphVault contributors
License: MIT
"""

from .config import GraphVaultSettings, get_config_summary
from .exceptions import (
    CodecSyntaxError,
    ExportError,
    GraphVaultError,
    NotFoundError,
    StorageError,
    StructureError,
    UnknownFormatError,
)
from .logging_service import LoggingConfig, LoggingService


def __getattr__(name):
    """Lazy import for components to avoid circular imports."""
    if name == "GraphTransfer":
        from .graph import GraphTransfer

        return GraphTransfer
    elif name == "validate_graph":
        from .validation import validate_graph

        return validate_graph
    elif name == "get_codec":
        from .codecs import get_codec

        return get_codec
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "GraphVaultSettings",
    "get_config_summary",
    "GraphVaultError",
    "StructureError",
    "CodecSyntaxError",
    "UnknownFormatError",
    "NotFoundError",
    "StorageError",
    "ExportError",
    "LoggingConfig",
    "LoggingService",
    "GraphTransfer",
    "validate_graph",
    "get_codec",
]
