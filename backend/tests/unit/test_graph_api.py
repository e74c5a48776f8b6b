from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from backend.src.api.main import app
from backend.src.api.routes.graph import get_graph_service
from backend.src.services.config import AppConfig
from backend.src.services.document_store import DocumentStoreService, get_store_service
from backend.src.services.renderer import NODE_ID_PLACEHOLDER

BUNDLE = {
    "schema_version": 1,
    "documents": [
        {"id": "a", "name": "Alpha.md", "kind": "leaf", "content": "Links to [[Beta]] here"},
        {
            "id": "folder",
            "name": "folder",
            "kind": "container",
            "children": [
                {"id": "b", "name": "Beta.md", "kind": "leaf", "content": "Beta body words"},
                {"id": "c", "name": "Gamma.md", "kind": "leaf", "content": "Unrelated prose"},
            ],
        },
    ],
}


@pytest.fixture
def store() -> DocumentStoreService:
    return DocumentStoreService(config=AppConfig())


@pytest.fixture
def client(store: DocumentStoreService):
    app.dependency_overrides[get_store_service] = lambda: store
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def loaded_client(client: TestClient) -> TestClient:
    response = client.put("/api/documents", json=BUNDLE)
    assert response.status_code == 200
    return client


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_empty_store_returns_empty_graph(client: TestClient) -> None:
    response = client.get("/api/graph")

    assert response.status_code == 200
    assert response.json()["nodes"] == []
    assert response.json()["edges"] == []


def test_get_graph_data_success(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph")

    assert response.status_code == 200
    data = response.json()
    assert [node["id"] for node in data["nodes"]] == ["a", "b", "c"]
    assert data["edges"] == [{"source": "a", "target": "b", "weight": 1.0, "kind": "explicit"}]
    assert data["scope"] == "all"


def test_get_graph_single_scope(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph", params={"scope": "single", "focus": "a"})

    assert response.status_code == 200
    assert [node["id"] for node in response.json()["nodes"]] == ["a"]
    assert response.json()["focus_id"] == "a"


def test_graph_summary(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph/summary", params={"scope": "connected", "focus": "b"})

    assert response.status_code == 200
    assert response.json() == {
        "node_count": 2,
        "edge_count": 1,
        "explicit_edge_count": 1,
        "similarity_edge_count": 0,
    }


def test_graph_uses_bundle_view_state(client: TestClient) -> None:
    client.put("/api/documents", json={**BUNDLE, "scope": "single", "focus_id": "c"})

    response = client.get("/api/graph")

    assert [node["id"] for node in response.json()["nodes"]] == ["c"]


def test_unknown_focus_returns_404(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph", params={"scope": "connected", "focus": "nope"})

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert body["detail"] == {"document_id": "nope"}


def test_invalid_scope_returns_400(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph", params={"scope": "everything"})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_replace_rejects_duplicate_ids(client: TestClient, store: DocumentStoreService) -> None:
    leaf = {"id": "dup", "name": "Dup.md", "kind": "leaf", "content": "x"}

    response = client.put("/api/documents", json={"documents": [leaf, leaf]})

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_document_tree"
    assert store.documents == []


def test_replace_rejects_leaf_with_children(client: TestClient) -> None:
    bad = {"id": "x", "name": "X.md", "kind": "leaf", "children": [{"id": "y", "name": "Y.md"}]}

    response = client.put("/api/documents", json={"documents": [bad]})

    assert response.status_code == 400


def test_get_documents_round_trip(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/documents")

    assert response.status_code == 200
    assert response.json()["documents"][1]["children"][0]["id"] == "b"


def test_document_links(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/documents/a/links")

    assert response.status_code == 200
    body = response.json()
    assert body["document_id"] == "a"
    assert body["links"] == [
        {"link_text": "Beta", "target_id": "b", "target_name": "Beta.md", "is_resolved": True}
    ]


def test_document_links_unknown_document(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/documents/missing/links")

    assert response.status_code == 404


def test_graph_view_html(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph/view", params={"color_by": "group"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert NODE_ID_PLACEHOLDER in response.text
    assert "color_by=group" in response.text


def test_graph_export_is_attachment(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph/export")

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="context-graph.html"'
    assert NODE_ID_PLACEHOLDER not in response.text


def test_get_graph_data_error(store: DocumentStoreService) -> None:
    """Unexpected failures surface as a 500 with the shared error body."""
    failing = Mock()
    failing.assemble.side_effect = Exception("Graph assembly failed")
    app.dependency_overrides[get_store_service] = lambda: store
    app.dependency_overrides[get_graph_service] = lambda: failing

    response = TestClient(app, raise_server_exceptions=False).get("/api/graph")

    app.dependency_overrides = {}

    assert response.status_code == 500
    assert response.json()["error"] == "internal_error"
    assert response.json()["message"] == "Graph assembly failed"


def test_replace_rejects_stored_focus_outside_tree(client: TestClient, store: DocumentStoreService) -> None:
    response = client.put("/api/documents", json={**BUNDLE, "scope": "all", "focus_id": "deleted-note"})

    assert response.status_code == 422
    assert store.bundle.focus_id is None
    assert client.get("/api/graph").status_code == 200
    assert client.get("/api/graph/summary").status_code == 200


def test_all_scope_ignores_unknown_focus(loaded_client: TestClient) -> None:
    response = loaded_client.get("/api/graph", params={"scope": "all", "focus": "deleted-note"})

    assert response.status_code == 200
    assert [node["id"] for node in response.json()["nodes"]] == ["a", "b", "c"]
