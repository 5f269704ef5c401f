"""
Pytest configuration and fixtures for all tests.

Provides shared setup/teardown and fixtures for logging and sample graphs.

Author: GraphVault contributors
License: MIT
"""

import json
from pathlib import Path

import pytest

from graphvault_core.logging_service import LoggingService

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure logging before any tests are collected."""
    LoggingService.configure_logging(level="DEBUG", format="json")


@pytest.fixture(autouse=True)
def reset_logging_service():
    """Reset LoggingService state before each test."""
    LoggingService._configured = False
    LoggingService._log_level = "INFO"
    LoggingService._config = None
    LoggingService._loggers = {}

    LoggingService.configure_logging(level="DEBUG", format="json")

    yield

    LoggingService._configured = False
    LoggingService._loggers = {}


@pytest.fixture
def example_graph_path() -> Path:
    """Path to the 9-node, 6-edge example graph."""
    return FIXTURES_DIR / "example_graph.json"


@pytest.fixture
def example_graph_payload(example_graph_path) -> dict:
    """Raw payload of the example graph."""
    return json.loads(example_graph_path.read_text(encoding="utf-8"))
