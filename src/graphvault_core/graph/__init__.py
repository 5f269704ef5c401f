"""
Graph import/export for GraphVault.
"""

from graphvault_core.graph.graph_transfer import ExportResult, GraphTransfer, ImportResult

__all__ = ["GraphTransfer", "ImportResult", "ExportResult"]
