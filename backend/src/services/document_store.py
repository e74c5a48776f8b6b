"""Traversal helpers and the in-memory document store."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Iterator, List, Optional, Sequence

from ..models.document import Document, DocumentBundle
from .config import AppConfig, get_config
from .vault import load_vault_tree

logger = logging.getLogger(__name__)


class StructuralIntegrityError(ValueError):
    """Raised when the document forest contains a cycle or a repeated id."""


class DocumentNotFoundError(KeyError):
    """Raised when a document id is not present in the store."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


def has_meaningful_content(document: Document) -> bool:
    """Graph-eligible leaves carry content that is non-empty after trimming."""
    return document.is_leaf and bool(document.content and document.content.strip())


def iter_documents(forest: Sequence[Document]) -> Iterator[Document]:
    """
    Yield every document in pre-order, depth-first.

    Raises StructuralIntegrityError when a document is reached twice, which
    covers both a container listed as its own descendant and duplicate ids.
    """
    seen: set[str] = set()
    stack: List[Document] = list(reversed(forest))
    while stack:
        document = stack.pop()
        if document.id in seen:
            raise StructuralIntegrityError(
                f"Document '{document.id}' appears more than once in the tree"
            )
        seen.add(document.id)
        yield document
        if not document.is_leaf:
            stack.extend(reversed(document.children))


def validate_tree(forest: Sequence[Document]) -> int:
    """Walk the whole forest, returning the document count."""
    return sum(1 for _ in iter_documents(forest))


def flatten_leaves(forest: Sequence[Document]) -> List[Document]:
    return [document for document in iter_documents(forest) if document.is_leaf]


def collect_graph_documents(forest: Sequence[Document]) -> List[Document]:
    """Return the leaves that contribute to the graph, in traversal order."""
    return [document for document in iter_documents(forest) if has_meaningful_content(document)]


def find_document(forest: Sequence[Document], document_id: str) -> Optional[Document]:
    for document in iter_documents(forest):
        if document.id == document_id:
            return document
    return None


def load_bundle(source: Path) -> DocumentBundle:
    """Load a bundle from a JSON file or build one from a markdown vault directory."""
    if source.is_dir():
        return DocumentBundle(documents=load_vault_tree(source))
    if not source.is_file():
        raise FileNotFoundError(f"Document source not found: {source}")
    bundle = DocumentBundle.model_validate_json(source.read_text(encoding="utf-8"))
    validate_tree(bundle.documents)
    return bundle


class DocumentStoreService:
    """Holds the current bundle; updates swap the whole bundle at once."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self._lock = Lock()
        self._bundle = DocumentBundle()
        source = self.config.document_store_path
        if source is not None:
            try:
                self.replace(load_bundle(source))
                logger.info(
                    "Document store loaded",
                    extra={
                        "source": str(source),
                        "document_count": validate_tree(self._bundle.documents),
                    },
                )
            except (OSError, ValueError) as exc:
                logger.warning("Starting with an empty store; could not load %s: %s", source, exc)

    @property
    def bundle(self) -> DocumentBundle:
        return self._bundle

    @property
    def documents(self) -> List[Document]:
        return self._bundle.documents

    def replace(self, bundle: DocumentBundle) -> DocumentBundle:
        """Validate the tree structure and stored focus, then install the bundle."""
        validate_tree(bundle.documents)
        if bundle.focus_id is not None and find_document(bundle.documents, bundle.focus_id) is None:
            raise StructuralIntegrityError(
                f"Stored focus '{bundle.focus_id}' is not a document in the tree"
            )
        with self._lock:
            self._bundle = bundle
        return bundle

    def get_document(self, document_id: str) -> Document:
        document = find_document(self._bundle.documents, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document


# Singleton instance for dependency injection
_store_service: DocumentStoreService | None = None


def get_store_service() -> DocumentStoreService:
    """Get or create the document store singleton."""
    global _store_service
    if _store_service is None:
        _store_service = DocumentStoreService()
    return _store_service


__all__ = [
    "StructuralIntegrityError",
    "get_store_service",
    "DocumentNotFoundError",
    "DocumentStoreService",
    "has_meaningful_content",
    "iter_documents",
    "validate_tree",
    "flatten_leaves",
    "collect_graph_documents",
    "find_document",
    "load_bundle",
]
