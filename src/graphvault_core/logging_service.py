"""
LoggingService - Centralized structured logging for GraphVault.

Provides consistent, machine-readable logging across all modules using
structlog. Logs go to stderr so command output on stdout stays clean.

Author: GraphVault contributors
License: MIT
"""

import logging
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from structlog.types import Processor

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_FORMATS = ["json", "console"]


@dataclass
class LoggingConfig:
    """
    Configuration for LoggingService.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" or "console")
        output_stream: Output destination (default: sys.stderr)
    """

    level: str = "INFO"
    format: str = "console"
    output_stream: Any = sys.stderr


class LoggingService:
    """
    Centralized structured logging service using structlog.

    Example:
        # Setup logging once at startup
        LoggingService.configure_logging(level="INFO", format="json")

        # Get logger for a module
        logger = LoggingService.get_logger("graphvault.cli")

        logger.info("graph_imported", nodes=9, edges=6)
    """

    # Class-level state
    _configured: bool = False
    _log_level: str = "INFO"
    _config: Optional[LoggingConfig] = None
    _loggers: dict[str, structlog.BoundLogger] = {}

    @classmethod
    def configure_logging(
        cls, level: str = "INFO", format: str = "console", config: Optional[LoggingConfig] = None
    ) -> None:
        """
        Configure global structured logging.

        This should be called ONCE at application startup before any logging.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            format: Output format ("json" or "console")
            config: Optional LoggingConfig overriding level and format

        Raises:
            ValueError: If level or format is invalid
            RuntimeError: If called after logging already configured
        """
        if cls._configured:
            raise RuntimeError("Logging already configured")

        if config is not None:
            cfg = config
        else:
            level_upper = level.upper()
            if level_upper not in VALID_LEVELS:
                raise ValueError(
                    f"Invalid log level: {level}. "
                    "Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
                )

            format_lower = format.lower()
            if format_lower not in VALID_FORMATS:
                raise ValueError(f"Invalid format: {format}. Must be 'json' or 'console'")

            cfg = LoggingConfig(level=level_upper, format=format_lower)

        cls._config = cfg
        cls._log_level = cfg.level

        structlog.configure(
            processors=cls._setup_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, cfg.level)),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=cfg.output_stream),
            cache_logger_on_first_use=True,
        )

        cls._configured = True

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def get_logger(cls, name: str) -> structlog.BoundLogger:
        """
        Get a module/component-specific logger (cached).

        Args:
            name: Logger name (typically module path)

        Raises:
            RuntimeError: If logging not configured yet
            ValueError: If name is empty or too long
        """
        if not cls._configured:
            raise RuntimeError("Logging not configured. Call configure_logging() first.")

        if not name:
            raise ValueError("Logger name cannot be empty")

        if len(name) > 200:
            raise ValueError("Logger name exceeds maximum length (200)")

        if name in cls._loggers:
            return cls._loggers[name]

        logger = structlog.get_logger(name)
        cls._loggers[name] = logger

        return logger

    @classmethod
    def log_operation(
        cls,
        operation: str,
        correlation_id: str,
        metadata: Optional[dict[str, Any]] = None,
        logger_name: str = "graphvault",
        level: str = "info",
    ) -> None:
        """
        Log an operation with standardized structure.

        Args:
            operation: Operation name (e.g., "import_graph")
            correlation_id: UUID for tracing this operation
            metadata: Additional context (parameters, results, metrics)
            logger_name: Which logger to use (default: "graphvault")
            level: Log level (default: "info")

        Raises:
            ValueError: If operation or correlation_id is empty
        """
        if not operation:
            raise ValueError("operation cannot be empty")

        if not correlation_id:
            raise ValueError("correlation_id cannot be empty")

        logger = cls.get_logger(logger_name)

        context = {
            "operation": operation,
            "correlation_id": correlation_id,
        }
        if metadata:
            context.update(metadata)

        log_method = getattr(logger, level.lower())
        log_method(operation, **context)

    @classmethod
    def log_error(
        cls,
        error: Exception,
        correlation_id: str,
        context: Optional[dict[str, Any]] = None,
        logger_name: str = "graphvault",
        include_stack_trace: bool = False,
    ) -> None:
        """
        Log an error with its type, message and error code.

        Args:
            error: Exception instance
            correlation_id: UUID for tracing
            context: Additional context about where the error occurred
            logger_name: Which logger to use (default: "graphvault")
            include_stack_trace: Whether to include the current stack trace

        Raises:
            ValueError: If correlation_id is empty
        """
        if not correlation_id:
            raise ValueError("correlation_id cannot be empty")

        logger = cls.get_logger(logger_name)

        log_context: dict[str, Any] = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            "correlation_id": correlation_id,
        }

        error_code = getattr(error, "error_code", None)
        if error_code:
            log_context["error_code"] = error_code

        if context:
            log_context.update(context)

        if include_stack_trace:
            log_context["stack_trace"] = traceback.format_exc()

        logger.error("error_occurred", **log_context)

    @classmethod
    def _setup_processors(cls) -> list[Processor]:
        """
        Setup structlog processors based on configuration.

        Processors (in order):
            1. add_log_level
            2. TimeStamper (ISO)
            3. StackInfoRenderer
            4. format_exc_info
            5. JSONRenderer or ConsoleRenderer
        """
        processors: list[Processor] = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if cls._config and cls._config.format == "console":
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        else:
            processors.append(structlog.processors.JSONRenderer())

        return processors
