"""Build a document forest from a markdown vault directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import frontmatter

from ..models.document import Document, DocumentKind

logger = logging.getLogger(__name__)

NOTE_SUFFIXES = {".md", ".markdown", ".txt"}
MAX_NOTE_BYTES = 1_048_576


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def read_note_body(path: Path) -> str:
    """Return the note body with any YAML frontmatter removed."""
    if path.stat().st_size > MAX_NOTE_BYTES:
        raise ValueError(f"Note exceeds 1 MiB limit: {path.name}")
    post = frontmatter.load(path)
    return post.content or ""


def _sorted_entries(directory: Path) -> List[Path]:
    return sorted(
        (entry for entry in directory.iterdir() if not _is_hidden(entry)),
        key=lambda entry: (not entry.is_dir(), entry.name.lower()),
    )


def load_vault_tree(root: Path) -> List[Document]:
    """
    Map folders to containers and note files to leaves.

    Document ids are vault-relative POSIX paths, so they stay unique across
    nesting levels. Symlinked directories are not followed.
    """
    root = root.resolve()

    def build(directory: Path) -> List[Document]:
        documents: List[Document] = []
        for entry in _sorted_entries(directory):
            relative = entry.relative_to(root).as_posix()
            if entry.is_dir():
                if entry.is_symlink():
                    continue
                documents.append(
                    Document(
                        id=relative,
                        name=entry.name,
                        kind=DocumentKind.CONTAINER,
                        children=build(entry),
                    )
                )
            elif entry.suffix.lower() in NOTE_SUFFIXES:
                try:
                    body = read_note_body(entry)
                except Exception as exc:
                    logger.warning("Skipping unreadable note %s: %s", relative, exc)
                    continue
                documents.append(
                    Document(id=relative, name=entry.name, kind=DocumentKind.LEAF, content=body)
                )
        return documents

    return build(root)


__all__ = ["load_vault_tree", "read_note_body", "NOTE_SUFFIXES", "MAX_NOTE_BYTES"]
