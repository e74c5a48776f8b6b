"""FastMCP server exposing context graph tools."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

load_dotenv()

from ..models.graph import GraphScope, GraphSummary
from ..services.document_store import flatten_leaves, get_store_service, iter_documents
from ..services.graph_builder import GraphService
from ..services.links import build_link_report

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "context-graph",
    instructions=(
        "Read-only tools over a note collection. Documents link to each other with [[name]] "
        "references, resolved case-insensitively by substring match against file names (first "
        "match in tree order wins). get_context_graph returns nodes and edges: explicit links "
        "have weight 1, similarity links have weight score*0.5 when shared vocabulary > 0.1. "
        "Scope 'single' and 'connected' require focus_id."
    ),
)


def _log_tool_call(tool_name: str, start_time: float, **fields: Any) -> None:
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "MCP tool called",
        extra={"tool_name": tool_name, "duration_ms": f"{duration_ms:.2f}", **fields},
    )


@mcp.tool(name="list_documents", description="List every document with its id, name and kind.")
def list_documents() -> List[Dict[str, Any]]:
    start_time = time.time()
    store = get_store_service()

    documents = [
        {"id": doc.id, "name": doc.name, "kind": doc.kind.value}
        for doc in iter_documents(store.documents)
    ]

    _log_tool_call("list_documents", start_time, result_count=len(documents))
    return documents


@mcp.tool(
    name="get_context_graph",
    description="Build the backlink and similarity graph for a scope and optional focus document.",
)
def get_context_graph(
    scope: Literal["all", "single", "connected"] = Field(
        default="all", description="all | single | connected"
    ),
    focus_id: Optional[str] = Field(
        default=None, description="Focus document id (required for single/connected)."
    ),
) -> Dict[str, Any]:
    start_time = time.time()
    store = get_store_service()

    if focus_id and scope != "all":
        store.get_document(focus_id)

    graph = GraphService().assemble(store.documents, GraphScope(scope), focus_id)
    summary = GraphSummary.from_graph(graph)

    _log_tool_call(
        "get_context_graph",
        start_time,
        scope=scope,
        focus_id=focus_id,
        node_count=summary.node_count,
        edge_count=summary.edge_count,
    )
    return {"graph": graph.model_dump(mode="json"), "summary": summary.model_dump()}


@mcp.tool(
    name="get_document_links",
    description="List the [[links]] in a document, marking which ones resolve to another document.",
)
def get_document_links(
    document_id: str = Field(..., description="Id of the document to inspect."),
) -> Dict[str, Any]:
    start_time = time.time()
    store = get_store_service()

    report = build_link_report(store.get_document(document_id), flatten_leaves(store.documents))

    _log_tool_call(
        "get_document_links",
        start_time,
        document_id=document_id,
        unresolved_count=len(report.unresolved),
    )
    return report.model_dump()


if __name__ == "__main__":
    transport = os.getenv("MCP_TRANSPORT", "stdio").strip().lower() or "stdio"

    if transport == "http":
        port = int(os.getenv("MCP_PORT", "8001"))
        host = os.getenv("MCP_HOST", "127.0.0.1")
        logger.info(
            "Starting MCP server",
            extra={"transport": transport, "host": host, "port": port},
        )
        mcp.run(transport=transport, host=host, port=port)
    else:
        logger.info("Starting MCP server", extra={"transport": transport})
        mcp.run(transport=transport)
