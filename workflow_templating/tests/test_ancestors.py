from __future__ import annotations

from workflow_templating.graph.ancestors import upstream_node_ids, upstream_nodes
from workflow_templating.schema.models import WorkflowEdge, WorkflowNode


def _nodes(*ids: str) -> list[WorkflowNode]:
    return [WorkflowNode(id=node_id, kind="action") for node_id in ids]


def _edges(*pairs: tuple[str, str]) -> list[WorkflowEdge]:
    return [WorkflowEdge(source=source, target=target) for source, target in pairs]


def test_linear_chain_returns_canvas_order() -> None:
    nodes = _nodes("A", "B", "C")
    # Edge declaration order deliberately reversed.
    edges = _edges(("B", "C"), ("A", "B"))

    result = upstream_nodes("C", nodes, edges)

    assert [node.id for node in result] == ["A", "B"]


def test_order_follows_nodes_array_not_discovery() -> None:
    nodes = _nodes("late", "target", "early")
    edges = _edges(("early", "late"), ("late", "target"))

    assert [node.id for node in upstream_nodes("target", nodes, edges)] == ["late", "early"]


def test_two_node_cycle_excludes_target() -> None:
    nodes = _nodes("A", "B")
    edges = _edges(("A", "B"), ("B", "A"))

    assert [node.id for node in upstream_nodes("B", nodes, edges)] == ["A"]
    assert [node.id for node in upstream_nodes("A", nodes, edges)] == ["B"]


def test_self_loop_is_ignored() -> None:
    nodes = _nodes("A", "B")
    edges = _edges(("B", "B"), ("A", "B"))

    assert [node.id for node in upstream_nodes("B", nodes, edges)] == ["A"]


def test_unknown_target_has_no_ancestors() -> None:
    nodes = _nodes("A", "B")
    edges = _edges(("A", "B"), ("A", "ghost"))

    assert upstream_nodes("ghost", nodes, edges) == []


def test_diamond_visits_shared_ancestor_once() -> None:
    nodes = _nodes("root", "left", "right", "sink")
    edges = _edges(("root", "left"), ("root", "right"), ("left", "sink"), ("right", "sink"))

    result = upstream_nodes("sink", nodes, edges)

    assert [node.id for node in result] == ["root", "left", "right"]


def test_duplicate_node_ids_are_reported_once() -> None:
    nodes = _nodes("A", "A", "B")
    edges = _edges(("A", "B"))

    assert [node.id for node in upstream_nodes("B", nodes, edges)] == ["A"]


def test_large_cyclic_graph_terminates_without_recursion() -> None:
    count = 10_000
    ids = [f"n{i}" for i in range(count)]
    nodes = _nodes(*ids)
    pairs = [(ids[i], ids[i + 1]) for i in range(count - 1)]
    pairs.append((ids[-1], ids[0]))
    edges = _edges(*pairs)

    ancestors = upstream_node_ids(ids[-1], edges)

    assert len(ancestors) == count - 1
    assert ids[-1] not in ancestors
    assert len(upstream_nodes(ids[5000], nodes, edges)) == count - 1
