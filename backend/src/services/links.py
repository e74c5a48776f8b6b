"""Wikilink extraction and fuzzy name resolution."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..models.document import Document
from ..models.graph import LinkReference, LinkReport

WIKILINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")
EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")


def strip_extension(name: str) -> str:
    """Drop a trailing extension-like suffix: 'Notes.md' -> 'Notes'."""
    return EXTENSION_PATTERN.sub("", name)


def extract_wikilinks(text: str | None) -> List[str]:
    """
    Extract [[...]] link text in order of appearance.

    Duplicates are kept and the text is returned untouched; matching is
    left to the resolver. Unterminated links are simply not matched.
    """
    return [match.group(1) for match in WIKILINK_PATTERN.finditer(text or "")]


def link_matches(link_text: str, document: Document) -> bool:
    """Case-insensitive substring match in either direction."""
    needle = link_text.lower()
    name = document.name.lower()
    if needle in name:
        return True
    stem = strip_extension(document.name).lower()
    # An empty stem (a file named ".md") would otherwise match every link.
    return bool(stem) and stem in needle


def resolve_wikilink(link_text: str, candidates: Sequence[Document]) -> Optional[Document]:
    """Return the first candidate leaf (in traversal order) matching the link text."""
    for document in candidates:
        if document.is_leaf and link_matches(link_text, document):
            return document
    return None


def build_link_report(document: Document, candidates: Sequence[Document]) -> LinkReport:
    """List every link in a document with its resolution status."""
    references: List[LinkReference] = []
    for link_text in extract_wikilinks(document.content):
        target = resolve_wikilink(link_text, candidates)
        references.append(
            LinkReference(
                link_text=link_text,
                target_id=target.id if target else None,
                target_name=target.name if target else None,
                is_resolved=target is not None,
            )
        )
    return LinkReport(document_id=document.id, links=references)


__all__ = [
    "WIKILINK_PATTERN",
    "strip_extension",
    "extract_wikilinks",
    "link_matches",
    "resolve_wikilink",
    "build_link_report",
]
