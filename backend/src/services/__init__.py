"""Service layer for graph derivation and its host surfaces."""

from .config import AppConfig, get_config, reload_config
from .document_store import (
    DocumentNotFoundError,
    DocumentStoreService,
    StructuralIntegrityError,
    collect_graph_documents,
    find_document,
    flatten_leaves,
    get_store_service,
    has_meaningful_content,
    iter_documents,
    load_bundle,
    validate_tree,
)
from .graph_builder import GraphService, select_documents
from .links import build_link_report, extract_wikilinks, resolve_wikilink, strip_extension
from .renderer import GraphRenderer
from .similarity import text_similarity, vocabulary, vocabulary_similarity
from .vault import load_vault_tree

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DocumentNotFoundError",
    "DocumentStoreService",
    "StructuralIntegrityError",
    "collect_graph_documents",
    "find_document",
    "flatten_leaves",
    "get_store_service",
    "has_meaningful_content",
    "iter_documents",
    "load_bundle",
    "validate_tree",
    "GraphService",
    "select_documents",
    "build_link_report",
    "extract_wikilinks",
    "resolve_wikilink",
    "strip_extension",
    "GraphRenderer",
    "text_similarity",
    "vocabulary",
    "vocabulary_similarity",
    "load_vault_tree",
]
