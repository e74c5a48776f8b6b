"""HTTP API route handlers."""

from . import documents, graph

__all__ = ["documents", "graph"]
