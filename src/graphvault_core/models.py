"""
Core data models for the graphvault_core module.

This module re-exports the canonical graph model from graphvault_db.models
to ensure a single, consistent definition across core and database layers.
"""

from __future__ import annotations

from graphvault_db.models import DEFAULT_NODE_TYPE, Edge, Graph, Node, serialize_labels

__all__ = ["DEFAULT_NODE_TYPE", "Edge", "Graph", "Node", "serialize_labels"]
