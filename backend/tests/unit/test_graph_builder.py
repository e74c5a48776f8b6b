"""Unit tests for graph assembly."""

import itertools

import pytest

from backend.src.models.document import Document, DocumentKind
from backend.src.models.graph import EdgeKind, GraphScope
from backend.src.services import graph_builder
from backend.src.services.config import AppConfig
from backend.src.services.graph_builder import GraphService, group_tag, node_size


def _leaf(doc_id: str, content: str, name: str | None = None) -> Document:
    return Document(id=doc_id, name=name or f"{doc_id}.md", kind=DocumentKind.LEAF, content=content)


def _folder(doc_id: str, *children: Document) -> Document:
    return Document(id=doc_id, name=doc_id, kind=DocumentKind.CONTAINER, children=list(children))


@pytest.fixture
def service() -> GraphService:
    return GraphService(config=AppConfig())


def _pairs(graph):
    return [frozenset((edge.source, edge.target)) for edge in graph.edges]


def _node(graph, node_id):
    return next(node for node in graph.nodes if node.id == node_id)


def test_explicit_link_end_to_end(service: GraphService) -> None:
    store = [
        _leaf("A", "See [[B]] for details, important important important"),
        _leaf("B", "Nothing about A here, random words aaaa bbbb cccc dddd eeee"),
    ]

    graph = service.assemble(store, GraphScope.ALL)

    assert len(graph.edges) == 1
    edge = graph.edges[0]
    assert (edge.source, edge.target) == ("A", "B")
    assert edge.weight == 1
    assert edge.kind is EdgeKind.EXPLICIT
    assert _node(graph, "A").connection_count == 1
    assert _node(graph, "B").connection_count == 1


def test_similarity_edge_weight(service: GraphService) -> None:
    store = [
        _leaf("X", "alpha beta gamma delta epsilon"),
        _leaf("Y", "alpha beta gamma zeta eta"),
    ]

    graph = service.assemble(store, GraphScope.ALL)

    assert len(graph.edges) == 1
    assert graph.edges[0].kind is EdgeKind.SIMILARITY
    assert graph.edges[0].weight == pytest.approx(0.3)


def test_similarity_threshold_is_strict(service: GraphService, monkeypatch) -> None:
    store = [_leaf("P", "words here please"), _leaf("Q", "other words there")]

    monkeypatch.setattr(graph_builder, "vocabulary_similarity", lambda first, second: 0.1)
    assert service.assemble(store, GraphScope.ALL).edges == []

    monkeypatch.setattr(graph_builder, "vocabulary_similarity", lambda first, second: 0.10001)
    edges = service.assemble(store, GraphScope.ALL).edges
    assert len(edges) == 1
    assert edges[0].weight == pytest.approx(0.050005)


def test_ten_percent_overlap_produces_no_edge(service: GraphService) -> None:
    shared = "common"
    first = " ".join([shared] + [f"first{i}" for i in range(9)])
    second = " ".join([shared] + [f"second{i}" for i in range(9)])

    graph = service.assemble([_leaf("P", first), _leaf("Q", second)], GraphScope.ALL)

    assert graph.edges == []


def test_explicit_link_takes_precedence(service: GraphService) -> None:
    text = "knowledge graph layout notes"
    store = [_leaf("A", f"{text} [[B]]"), _leaf("B", text)]

    graph = service.assemble(store, GraphScope.ALL)

    assert len(graph.edges) == 1
    assert graph.edges[0].weight == 1
    assert graph.edges[0].kind is EdgeKind.EXPLICIT


def test_no_duplicate_edges(service: GraphService) -> None:
    store = [
        _leaf("A", "[[B]] [[B]] [[C]] shared vocabulary words"),
        _leaf("B", "[[A]] shared vocabulary words"),
        _leaf("C", "[[A]] [[B]] shared vocabulary words"),
    ]

    graph = service.assemble(store, GraphScope.ALL)
    pairs = _pairs(graph)

    assert len(pairs) == len(set(pairs)) == 3
    for node in graph.nodes:
        assert node.connection_count == 2


def test_self_reference_is_excluded(service: GraphService) -> None:
    graph = service.assemble([_leaf("Solo", "I link to [[Solo]] myself")], GraphScope.ALL)

    assert graph.edges == []
    assert graph.nodes[0].connection_count == 0


def test_single_scope_isolation(service: GraphService) -> None:
    text = "shared vocabulary between documents"
    store = [
        _leaf("F", f"{text} [[G]]"),
        _leaf("G", f"{text} [[F]]"),
        _leaf("H", text),
    ]

    graph = service.assemble(store, GraphScope.SINGLE, "F")

    assert [node.id for node in graph.nodes] == ["F"]
    assert graph.edges == []


@pytest.mark.parametrize("scope", [GraphScope.SINGLE, GraphScope.CONNECTED])
def test_focus_scopes_without_focus_are_empty(service: GraphService, scope: GraphScope) -> None:
    graph = service.assemble([_leaf("A", "content words")], scope, None)

    assert graph.nodes == []
    assert graph.edges == []


def test_focus_scopes_with_unknown_focus_are_empty(service: GraphService) -> None:
    graph = service.assemble([_leaf("A", "content words")], GraphScope.CONNECTED, "missing")

    assert graph.nodes == []


def test_connected_scope_closure(service: GraphService) -> None:
    store = [
        _leaf("F", "Focus links to [[Out]]"),
        _leaf("Out", "Outgoing target text"),
        _leaf("In", "Incoming source mentions [[F]]"),
        _leaf("Other", "Unrelated but mentions [[Out]]"),
    ]

    graph = service.assemble(store, GraphScope.CONNECTED, "F")

    assert {node.id for node in graph.nodes} == {"F", "Out", "In"}
    assert {frozenset(p) for p in [("F", "Out"), ("In", "F")]} <= set(_pairs(graph))


def test_link_to_document_outside_scope_adds_no_edge(service: GraphService) -> None:
    store = [
        _leaf("F", "Focus links to [[Out]]"),
        _leaf("Out", "Outgoing target mentions [[Other]]"),
        _leaf("Other", "Unrelated"),
    ]

    graph = service.assemble(store, GraphScope.CONNECTED, "F")

    assert {node.id for node in graph.nodes} == {"F", "Out"}
    for edge in graph.edges:
        assert {edge.source, edge.target} <= {"F", "Out"}


def test_nested_documents_and_empty_content(service: GraphService) -> None:
    store = [
        _folder("root", _leaf("a", "text [[b]]"), _folder("sub", _leaf("b", "more text"))),
        _leaf("blank", "   "),
    ]

    graph = service.assemble(store, GraphScope.ALL)

    assert [node.id for node in graph.nodes] == ["a", "b"]
    assert graph.nodes[0].display_name == "a"


def test_node_size_is_clamped() -> None:
    assert node_size(0, 10) == 10
    assert node_size(250, 10) == 25
    assert node_size(10_000, 10) == 50


def test_min_node_size_comes_from_config() -> None:
    service = GraphService(config=AppConfig(min_node_size=20))

    graph = service.assemble([_leaf("A", "few words")], GraphScope.ALL)

    assert graph.nodes[0].visual_size == 20
    assert graph.nodes[0].word_count == 2


def test_group_tag_is_deterministic() -> None:
    ids = [f"doc-{i}" for i in range(50)]

    tags = [group_tag(doc_id, 5) for doc_id in ids]

    assert tags == [group_tag(doc_id, 5) for doc_id in ids]
    assert all(0 <= tag < 5 for tag in tags)
    assert len(set(tags)) > 1


def test_assembly_is_repeatable(service: GraphService) -> None:
    store = [_leaf(f"n{i}", f"shared words topic{i % 3} extra{i}") for i in range(6)]

    first = service.assemble(store, GraphScope.ALL)
    second = service.assemble(store, GraphScope.ALL)

    assert first == second


def test_every_pair_at_most_once_in_dense_graph(service: GraphService) -> None:
    names = ["Alpha", "Bravo", "Charlie", "Delta"]
    store = [
        _leaf(name, " ".join(f"[[{other}]]" for other in names) + " common words everywhere")
        for name in names
    ]

    graph = service.assemble(store, GraphScope.ALL)

    assert len(graph.edges) == len(list(itertools.combinations(names, 2)))
    assert all(edge.kind is EdgeKind.EXPLICIT for edge in graph.edges)
