"""Pydantic models for data validation and serialization."""

from .document import SCHEMA_VERSION, Document, DocumentBundle, DocumentKind
from .graph import (
    ColorMode,
    EdgeKind,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphScope,
    GraphSummary,
    LinkReference,
    LinkReport,
)

__all__ = [
    "SCHEMA_VERSION",
    "Document",
    "DocumentBundle",
    "DocumentKind",
    "ColorMode",
    "EdgeKind",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "GraphScope",
    "GraphSummary",
    "LinkReference",
    "LinkReport",
]
