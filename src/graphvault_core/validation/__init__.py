"""
Validation module for GraphVault.

Converts raw decoded payloads into the typed graph model.
"""

from graphvault_core.validation.graph_validator import (
    validate_edge,
    validate_graph,
    validate_node,
)

__all__ = ["validate_graph", "validate_node", "validate_edge"]
