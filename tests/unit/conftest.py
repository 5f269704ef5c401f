"""
Unit test fixtures.

Isolates unit tests from environment variables (.env file)
to ensure tests verify actual default values.

Author: GraphVault contributors
License: MIT
"""

import os

import pytest

from graphvault_core.models import Edge, Graph, Node

# Environment variables that affect GraphVaultSettings defaults
CONFIG_ENV_VARS = [
    "DATABASE_PATH",
    "DEFAULT_INPUT_FILE",
    "STRICT_EDGES",
    "PRETTY_PRINT",
    "CSV_DELIMITER",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env_for_unit_tests(monkeypatch, tmp_path):
    """
    Remove config-related environment variables and change working
    directory so no .env file is picked up.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    original_dir = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)


@pytest.fixture
def sample_graph() -> Graph:
    """Small graph with an extra node field and a multi-label edge."""
    return Graph.from_parts(
        [
            Node(id="c1", label="Cats are better than dogs", type="claim"),
            Node(id="e1", label="Cats purr", type="evidence", weight=0.8),
            Node(id="e2", label="Dogs bark at night", type="evidence"),
        ],
        [
            Edge(source="e1", target="c1", label=["supports"]),
            Edge(source="e2", target="c1", label=["supports", "cites"]),
        ],
    )


@pytest.fixture
def empty_graph() -> Graph:
    return Graph()
