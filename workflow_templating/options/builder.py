"""
Compose ancestor discovery, field resolution and display names into the
candidate lists shown by the template pickers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from workflow_templating.expr.tokens import encode_token
from workflow_templating.fields.display import display_name
from workflow_templating.fields.resolver import resolve_fields
from workflow_templating.graph.ancestors import upstream_nodes
from workflow_templating.registry.action_registry import ActionRegistry
from workflow_templating.schema.models import (
    FieldDescriptor,
    OptionKind,
    TemplateOption,
    WorkflowEdge,
    WorkflowNode,
)


@dataclass
class FieldGroup:
    """One upstream node with its output fields, as listed in the expression editor."""

    node: WorkflowNode
    node_name: str
    fields: List[FieldDescriptor] = field(default_factory=list)


def build_field_groups(
    target_id: str,
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    *,
    registry: Optional[ActionRegistry] = None,
) -> List[FieldGroup]:
    return [
        FieldGroup(
            node=node,
            node_name=display_name(node, registry),
            fields=resolve_fields(node, registry),
        )
        for node in upstream_nodes(target_id, nodes, edges)
    ]


def build_template_options(
    target_id: str,
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    *,
    registry: Optional[ActionRegistry] = None,
) -> List[TemplateOption]:
    """
    Flat candidate list: for each ancestor (canvas order) a whole-node option
    followed by one option per output field.
    """

    options: List[TemplateOption] = []
    for group in build_field_groups(target_id, nodes, edges, registry=registry):
        node_id = group.node.id
        options.append(
            TemplateOption(
                kind=OptionKind.node,
                node_id=node_id,
                node_name=group.node_name,
                token=encode_token(node_id, group.node_name),
            )
        )
        for descriptor in group.fields:
            options.append(
                TemplateOption(
                    kind=OptionKind.field,
                    node_id=node_id,
                    node_name=group.node_name,
                    field=descriptor.field,
                    description=descriptor.description,
                    token=encode_token(node_id, group.node_name, descriptor.field),
                )
            )
    return options


def filter_field_groups(groups: Sequence[FieldGroup], query: str) -> List[FieldGroup]:
    """
    Case-insensitive search over groups. A group whose node name matches is
    kept whole; otherwise only its matching fields (by path or description)
    survive, and groups left empty are dropped.
    """

    needle = query.strip().lower()
    if not needle:
        return list(groups)

    filtered: List[FieldGroup] = []
    for group in groups:
        if needle in group.node_name.lower():
            filtered.append(group)
            continue
        matching = [
            descriptor
            for descriptor in group.fields
            if needle in descriptor.field.lower() or needle in descriptor.description.lower()
        ]
        if matching:
            filtered.append(FieldGroup(node=group.node, node_name=group.node_name, fields=matching))
    return filtered


def describe_upstream_context(
    target_id: str,
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    *,
    registry: Optional[ActionRegistry] = None,
) -> str:
    """Markdown summary of upstream nodes and their fields, for prompt context."""

    groups = build_field_groups(target_id, nodes, edges, registry=registry)
    if not groups:
        return "No upstream nodes connected."

    sections = []
    for group in groups:
        discriminant = group.node.discriminant or group.node.kind
        field_lines = "\n".join(
            f"  - {descriptor.field} ({descriptor.description})" for descriptor in group.fields
        )
        sections.append(
            f'### Upstream Node: "{group.node_name}" ({discriminant})\n'
            f"Output fields:\n{field_lines}\n"
            f"Reference as: {encode_token(group.node.id, group.node_name, '<field>')}"
        )
    return "## Workflow Context\n\n" + "\n\n".join(sections)
