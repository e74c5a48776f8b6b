"""HTTP API routes for the context graph."""

from __future__ import annotations

from typing import Annotated, Optional, Tuple
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from ...models.graph import ColorMode, GraphData, GraphScope, GraphSummary
from ...services.document_store import DocumentStoreService, get_store_service
from ...services.graph_builder import GraphService
from ...services.renderer import NODE_ID_PLACEHOLDER, GraphRenderer

router = APIRouter()

EXPORT_FILENAME = "context-graph.html"


def get_graph_service() -> GraphService:
    return GraphService()


def get_renderer() -> GraphRenderer:
    return GraphRenderer()


StoreDep = Annotated[DocumentStoreService, Depends(get_store_service)]
GraphDep = Annotated[GraphService, Depends(get_graph_service)]
RendererDep = Annotated[GraphRenderer, Depends(get_renderer)]
ScopeQuery = Annotated[Optional[GraphScope], Query(description="all | single | connected")]
FocusQuery = Annotated[Optional[str], Query(description="Focus document id")]
ColorQuery = Annotated[Optional[ColorMode], Query(description="connections | group")]


def _view_state(
    store: DocumentStoreService, scope: Optional[GraphScope], focus: Optional[str]
) -> Tuple[GraphScope, Optional[str]]:
    """Fall back to the bundle's stored view; focus scopes need a known focus."""
    bundle = store.bundle
    effective_scope = scope or bundle.scope
    effective_focus = focus if focus is not None else bundle.focus_id
    if effective_focus and effective_scope is not GraphScope.ALL:
        store.get_document(effective_focus)
    return effective_scope, effective_focus


def _assemble(
    store: DocumentStoreService,
    graph_service: GraphService,
    scope: Optional[GraphScope],
    focus: Optional[str],
) -> GraphData:
    effective_scope, effective_focus = _view_state(store, scope, focus)
    return graph_service.assemble(store.documents, effective_scope, effective_focus)


@router.get("/api/graph", response_model=GraphData)
async def get_graph_data(
    store: StoreDep,
    graph_service: GraphDep,
    scope: ScopeQuery = None,
    focus: FocusQuery = None,
) -> GraphData:
    """Retrieve graph visualization data."""
    return _assemble(store, graph_service, scope, focus)


@router.get("/api/graph/summary", response_model=GraphSummary)
async def get_graph_summary(
    store: StoreDep,
    graph_service: GraphDep,
    scope: ScopeQuery = None,
    focus: FocusQuery = None,
) -> GraphSummary:
    """Node and edge counts for the current view."""
    return GraphSummary.from_graph(_assemble(store, graph_service, scope, focus))


@router.get("/api/graph/view", response_class=HTMLResponse)
async def view_graph(
    store: StoreDep,
    graph_service: GraphDep,
    renderer: RendererDep,
    scope: ScopeQuery = None,
    focus: FocusQuery = None,
    color_by: ColorQuery = None,
) -> HTMLResponse:
    """Interactive force-directed view; clicking a node refocuses the view."""
    graph = _assemble(store, graph_service, scope, focus)
    template = _click_template(graph.scope, color_by)
    return HTMLResponse(renderer.render_html(graph, color_by=color_by, click_url_template=template))


@router.get("/api/graph/export")
async def export_graph(
    store: StoreDep,
    graph_service: GraphDep,
    renderer: RendererDep,
    scope: ScopeQuery = None,
    focus: FocusQuery = None,
    color_by: ColorQuery = None,
) -> Response:
    """Download the rendered view as a standalone HTML file."""
    graph = _assemble(store, graph_service, scope, focus)
    return Response(
        content=renderer.render_html(graph, color_by=color_by),
        media_type="text/html",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


def _click_template(scope: GraphScope, color_by: Optional[ColorMode]) -> str:
    template = f"/api/graph/view?scope={scope.value}&focus={NODE_ID_PLACEHOLDER}"
    if color_by is not None:
        template += f"&color_by={quote(color_by.value)}"
    return template
