"""Graph data models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class GraphScope(str, Enum):
    """Which documents are retained before edges are computed."""

    ALL = "all"
    SINGLE = "single"
    CONNECTED = "connected"


class EdgeKind(str, Enum):
    EXPLICIT = "explicit"
    SIMILARITY = "similarity"


class ColorMode(str, Enum):
    CONNECTIONS = "connections"
    GROUP = "group"


class GraphNode(BaseModel):
    """Represents a single document in the graph."""

    id: str = Field(..., description="Source document id")
    display_name: str = Field(..., description="Document name without extension")
    connection_count: int = Field(default=0, ge=0, description="Edges touching this node")
    visual_size: float = Field(..., gt=0, description="Rendered radius")
    word_count: int = Field(default=0, ge=0)
    group_tag: int = Field(default=0, ge=0, description="Bucket for categorical coloring")


class GraphEdge(BaseModel):
    """Represents an undirected connection between two documents."""

    source: str = Field(..., description="ID of the source document")
    target: str = Field(..., description="ID of the target document")
    weight: float = Field(..., gt=0, le=1)
    kind: EdgeKind


class GraphData(BaseModel):
    """The top-level payload returned by the API."""

    nodes: List[GraphNode]
    edges: List[GraphEdge]
    scope: GraphScope = GraphScope.ALL
    focus_id: Optional[str] = None


class GraphSummary(BaseModel):
    node_count: int = Field(..., ge=0)
    edge_count: int = Field(..., ge=0)
    explicit_edge_count: int = Field(..., ge=0)
    similarity_edge_count: int = Field(..., ge=0)

    @classmethod
    def from_graph(cls, graph: GraphData) -> GraphSummary:
        explicit = sum(1 for edge in graph.edges if edge.kind is EdgeKind.EXPLICIT)
        return cls(
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
            explicit_edge_count=explicit,
            similarity_edge_count=len(graph.edges) - explicit,
        )


class LinkReference(BaseModel):
    """A single [[...]] reference found in a document."""

    link_text: str
    target_id: Optional[str] = Field(None, description="Null if unresolved")
    target_name: Optional[str] = None
    is_resolved: bool


class LinkReport(BaseModel):
    document_id: str
    links: List[LinkReference]

    @property
    def unresolved(self) -> List[LinkReference]:
        return [link for link in self.links if not link.is_resolved]


__all__ = [
    "GraphScope",
    "EdgeKind",
    "ColorMode",
    "GraphNode",
    "GraphEdge",
    "GraphData",
    "GraphSummary",
    "LinkReference",
    "LinkReport",
]
