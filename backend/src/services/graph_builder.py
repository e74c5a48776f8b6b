"""Derive the context graph (nodes and edges) from the document store."""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Dict, FrozenSet, List, Optional, Sequence, Set

from ..models.document import Document
from ..models.graph import EdgeKind, GraphData, GraphEdge, GraphNode, GraphScope
from .config import AppConfig, get_config
from .document_store import collect_graph_documents
from .links import extract_wikilinks, resolve_wikilink, strip_extension
from .similarity import vocabulary, vocabulary_similarity

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.1
SIMILARITY_WEIGHT = 0.5
EXPLICIT_WEIGHT = 1.0
MAX_NODE_SIZE = 50.0


def count_words(text: str | None) -> int:
    return len((text or "").split())


def node_size(word_count: int, min_size: float) -> float:
    """Grow with word count, clamped to [min_size, 50]."""
    return max(min_size, min(MAX_NODE_SIZE, word_count / 10))


def group_tag(document_id: str, buckets: int) -> int:
    """Stable color bucket derived from the document id."""
    digest = hashlib.sha1(document_id.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") % buckets


def _pair(first: str, second: str) -> FrozenSet[str]:
    return frozenset((first, second))


def select_documents(
    candidates: Sequence[Document],
    scope: GraphScope,
    focus_id: Optional[str],
) -> List[Document]:
    """Apply the scope filter to the graph-eligible documents."""
    if scope is GraphScope.ALL:
        return list(candidates)

    focus = next((doc for doc in candidates if doc.id == focus_id), None) if focus_id else None
    if focus is None:
        if focus_id:
            logger.warning(
                "Focus document is not part of the graph",
                extra={"focus_id": focus_id, "scope": scope.value},
            )
        return []

    if scope is GraphScope.SINGLE:
        return [focus]

    neighborhood: Set[str] = {focus.id}
    for link_text in extract_wikilinks(focus.content):
        target = resolve_wikilink(link_text, candidates)
        if target is not None:
            neighborhood.add(target.id)
    for document in candidates:
        for link_text in extract_wikilinks(document.content):
            target = resolve_wikilink(link_text, candidates)
            if target is not None and target.id == focus.id:
                neighborhood.add(document.id)
                break
    return [doc for doc in candidates if doc.id in neighborhood]


class GraphService:
    """Assemble graph payloads; stateless between calls."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()

    def assemble(
        self,
        documents: Sequence[Document],
        scope: GraphScope = GraphScope.ALL,
        focus_id: Optional[str] = None,
    ) -> GraphData:
        start_time = time.time()

        candidates = collect_graph_documents(documents)
        retained = select_documents(candidates, scope, focus_id)

        nodes: Dict[str, GraphNode] = {}
        for document in retained:
            words = count_words(document.content)
            nodes[document.id] = GraphNode(
                id=document.id,
                display_name=strip_extension(document.name),
                visual_size=node_size(words, self.config.min_node_size),
                word_count=words,
                group_tag=group_tag(document.id, self.config.group_count),
            )

        edges: List[GraphEdge] = []
        connected: Set[FrozenSet[str]] = set()

        def connect(source: str, target: str, weight: float, kind: EdgeKind) -> None:
            edges.append(GraphEdge(source=source, target=target, weight=weight, kind=kind))
            connected.add(_pair(source, target))
            nodes[source].connection_count += 1
            nodes[target].connection_count += 1

        for document in retained:
            for link_text in extract_wikilinks(document.content):
                target = resolve_wikilink(link_text, candidates)
                if target is None or target.id == document.id or target.id not in nodes:
                    continue
                if _pair(document.id, target.id) in connected:
                    continue
                connect(document.id, target.id, EXPLICIT_WEIGHT, EdgeKind.EXPLICIT)

        if scope is not GraphScope.SINGLE:
            vocabularies = {document.id: vocabulary(document.content) for document in retained}
            for index, first in enumerate(retained):
                for second in retained[index + 1 :]:
                    if _pair(first.id, second.id) in connected:
                        continue
                    score = vocabulary_similarity(vocabularies[first.id], vocabularies[second.id])
                    if score > SIMILARITY_THRESHOLD:
                        connect(first.id, second.id, score * SIMILARITY_WEIGHT, EdgeKind.SIMILARITY)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Graph assembled",
            extra={
                "scope": scope.value,
                "focus_id": focus_id,
                "node_count": len(nodes),
                "edge_count": len(edges),
                "duration_ms": f"{duration_ms:.2f}",
            },
        )

        return GraphData(
            nodes=list(nodes.values()),
            edges=edges,
            scope=scope,
            focus_id=focus_id,
        )


__all__ = [
    "GraphService",
    "select_documents",
    "group_tag",
    "node_size",
    "count_words",
    "SIMILARITY_THRESHOLD",
]
