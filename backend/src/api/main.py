"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from .middleware import register_error_handlers
from .routes import documents, graph
from ..services.config import get_config
from ..services.document_store import get_store_service, validate_tree

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler to run startup tasks."""
    store = get_store_service()
    logger.info(
        "Startup complete: document store ready",
        extra={"document_count": validate_tree(store.documents)},
    )
    yield


app = FastAPI(
    title="Context Graph API",
    description="Derives a backlink and similarity graph from a document collection",
    version="0.1.0",
    lifespan=lifespan,
)

config = get_config()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(documents.router, tags=["documents"])
app.include_router(graph.router, tags=["graph"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


__all__ = ["app"]
