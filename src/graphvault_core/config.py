"""
Configuration Management for GraphVault.

Provides type-safe configuration loading using Pydantic Settings.
Supports environment variables, .env files, and defaults for zero-config operation.

Settings are built once by the entry point and passed explicitly to the
components that need them; nothing in the core reads process state itself.

Author: GraphVault contributors
License: MIT
"""

from pathlib import Path
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class GraphVaultSettings(BaseSettings):
    """
    Configuration for GraphVault import/export.

    Configuration is loaded with the following priority (highest to lowest):
    1. Explicit keyword arguments
    2. System environment variables
    3. .env file in the working directory
    4. Hardcoded default values

    Example:
        ```python
        settings = GraphVaultSettings(database_path="graphs/arguing.sqlite")
        transfer = GraphTransfer(store=store, settings=settings)
        ```
    """

    # ========================================
    # STORAGE
    # ========================================

    database_path: Path = Field(
        default=Path("arguing.sqlite"), description="SQLite file holding the graph"
    )

    default_input_file: Path = Field(
        default=Path("graph.json"), description="Input file used when none is given"
    )

    strict_edges: bool = Field(
        default=False,
        description="Reject edges whose endpoints are not known node ids",
    )

    # ========================================
    # CODECS
    # ========================================

    pretty_print: bool = Field(default=True, description="Indent JSON and XML exports")

    csv_delimiter: str = Field(default=",", description="CSV field delimiter")

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================

    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(default="console", description="Log format (json, console)")

    # ========================================
    # VALIDATORS
    # ========================================

    @field_validator("database_path", "default_input_file")
    @classmethod
    def validate_path_not_empty(cls, v: Path) -> Path:
        """Reject empty paths."""
        if not str(v).strip() or str(v) == ".":
            raise ValueError("path cannot be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is one of allowed values.

        Args:
            v: Log level string (case-insensitive)

        Returns:
            Uppercase log level string

        Raises:
            ValueError: If log level not in allowed values
        """
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got '{v}'")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is json or console (case-insensitive)."""
        allowed = ["json", "console"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got '{v}'")
        return v_lower

    @field_validator("csv_delimiter")
    @classmethod
    def validate_csv_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"csv_delimiter must be a single character, got '{v}'")
        return v

    # ========================================
    # COMPUTED PROPERTIES
    # ========================================

    @property
    def is_in_memory(self) -> bool:
        """True when the store lives only for the process lifetime."""
        return str(self.database_path) == ":memory:"

    # ========================================
    # PYDANTIC CONFIGURATION
    # ========================================

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "validate_assignment": True,
        "extra": "forbid",
    }


def get_config_summary(settings: GraphVaultSettings) -> Dict[str, Any]:
    """
    Get configuration summary for logging/debugging.

    Args:
        settings: GraphVaultSettings instance

    Returns:
        Configuration summary grouped by category
    """
    return {
        "storage": {
            "database_path": str(settings.database_path),
            "strict_edges": settings.strict_edges,
        },
        "codecs": {
            "pretty_print": settings.pretty_print,
            "csv_delimiter": settings.csv_delimiter,
        },
        "logging": {
            "level": settings.log_level,
            "format": settings.log_format,
        },
    }
