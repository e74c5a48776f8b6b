"""HTTP API routes for the document store."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from ...models.document import DocumentBundle
from ...models.graph import LinkReport
from ...services.document_store import (
    DocumentStoreService,
    flatten_leaves,
    get_store_service,
    validate_tree,
)
from ...services.links import build_link_report

logger = logging.getLogger(__name__)

router = APIRouter()

StoreDep = Annotated[DocumentStoreService, Depends(get_store_service)]


@router.get("/api/documents", response_model=DocumentBundle)
async def get_documents(store: StoreDep) -> DocumentBundle:
    """Return the current document bundle."""
    return store.bundle


@router.put("/api/documents", response_model=DocumentBundle)
async def replace_documents(bundle: DocumentBundle, store: StoreDep) -> DocumentBundle:
    """Replace the whole document bundle."""
    installed = store.replace(bundle)
    logger.info(
        "Document bundle replaced",
        extra={
            "document_count": validate_tree(installed.documents),
            "scope": installed.scope.value,
            "focus_id": installed.focus_id,
        },
    )
    return installed


@router.get("/api/documents/{document_id:path}/links", response_model=LinkReport)
async def get_document_links(document_id: str, store: StoreDep) -> LinkReport:
    """List the [[links]] of one document with their resolved targets."""
    document = store.get_document(document_id)
    return build_link_report(document, flatten_leaves(store.documents))
