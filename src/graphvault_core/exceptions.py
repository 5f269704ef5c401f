"""
Exception hierarchy for GraphVault.

Defines all exception types with error codes, transient flags, and correlation IDs.

Author: GraphVault contributors
License: MIT
"""

import uuid
from typing import Any, Dict, Optional


class GraphVaultError(Exception):
    """
    Base exception for all GraphVault errors.

    All GraphVault exceptions inherit from this class. Provides standard
    error attributes: message, error_code, details, correlation_id.

    Attributes:
        message: Human-readable error message
        error_code: Programmatic error code (e.g., "STRUCT_001")
        details: Additional context (dict)
        correlation_id: UUID for tracing across layers
        original_exception: Wrapped exception (if any)
        is_transient: Whether error is transient (retryable)

    Example:
        raise GraphVaultError(
            message="Operation failed",
            error_code="ERR_UNKNOWN",
            details={"param": "value"},
        )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        """
        Initialize GraphVaultError.

        Args:
            message: Error message
            error_code: Error code for programmatic handling
            details: Additional context dict
            correlation_id: UUID for request tracing
            original_exception: Original wrapped exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.original_exception = original_exception
        self.is_transient = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with all error information
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "original_error": str(self.original_exception) if self.original_exception else None,
        }


class StructureError(GraphVaultError):
    """
    Raised when input does not have the shape of a graph.

    Error Codes:
        STRUCT_001: Missing required field
        STRUCT_002: Invalid field type
        STRUCT_003: Empty field value
        STRUCT_004: Dangling edge (strict mode)

    ``details`` names the offending ``collection``, ``index`` and ``field``.
    Not transient.
    """

    def __init__(self, message: str, error_code: str = "STRUCT_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class CodecSyntaxError(GraphVaultError):
    """
    Raised when bytes cannot be parsed in the selected format.

    Error Codes:
        CODEC_001: Malformed document
        CODEC_002: Unexpected document layout (wrong root, missing columns)
        CODEC_003: Invalid text encoding

    ``details["source"]`` names the offending file. Not transient.
    """

    def __init__(self, message: str, error_code: str = "CODEC_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class UnknownFormatError(GraphVaultError):
    """Raised when a format tag has no codec (FMT_001)."""

    def __init__(self, message: str, error_code: str = "FMT_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class NotFoundError(GraphVaultError):
    """
    Raised when a referenced file or directory does not exist.

    Error Codes:
        IO_001: Input file not found
        IO_002: Output directory not found
    """

    def __init__(self, message: str, error_code: str = "IO_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class StorageError(GraphVaultError):
    """
    Raised when the storage layer fails.

    Wraps graphvault_db exceptions; the original is kept in
    ``original_exception``.

    Error Codes:
        DB_001: Store could not be opened or is closed
        DB_002: Schema creation failed
        DB_003: Transaction failed and was rolled back
    """

    def __init__(self, message: str, error_code: str = "DB_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class ExportError(GraphVaultError):
    """Raised when encoding or writing an export fails unexpectedly (EXP_001)."""

    def __init__(self, message: str, error_code: str = "EXP_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False
