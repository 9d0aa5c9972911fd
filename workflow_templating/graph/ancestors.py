"""
Backward traversal over workflow edges.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Set

from workflow_templating.schema.models import WorkflowEdge, WorkflowNode


def upstream_node_ids(target_id: str, edges: Sequence[WorkflowEdge]) -> Set[str]:
    """
    Ids of every node that reaches ``target_id`` by following edges forward.

    Iterative reverse depth-first search; each id is visited once, so cyclic
    graphs terminate in O(V + E). The target itself is never its own ancestor.
    """

    incoming: Dict[str, List[str]] = defaultdict(list)
    for edge in edges:
        incoming[edge.target].append(edge.source)

    visited: Set[str] = {target_id}
    stack = [target_id]
    while stack:
        current = stack.pop()
        for source in incoming.get(current, ()):
            if source in visited:
                continue
            visited.add(source)
            stack.append(source)

    visited.discard(target_id)
    return visited


def upstream_nodes(
    target_id: str,
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
) -> List[WorkflowNode]:
    """
    Ancestors of ``target_id`` in the order they appear in ``nodes`` (canvas
    order), not discovery order. Unknown targets have no ancestors.
    """

    if not any(node.id == target_id for node in nodes):
        return []

    ancestors = upstream_node_ids(target_id, edges)
    seen: Set[str] = set()
    ordered: List[WorkflowNode] = []
    for node in nodes:
        if node.id in ancestors and node.id not in seen:
            seen.add(node.id)
            ordered.append(node)
    return ordered

