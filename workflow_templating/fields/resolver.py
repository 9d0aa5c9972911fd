"""
Resolve the output fields a node exposes to its downstream nodes.

Resolution order:
  1. built-in resolver for the node's ``ActionKind`` (declared schema on the
     config first, then the fixed fields for that kind);
  2. the plugin action registry, for discriminants with no built-in;
  3. a generic ``data`` field, so the result is never empty.

Trigger nodes use the webhook schema when declared and otherwise the fixed
trigger fields.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from shared.logger import get_logger
from workflow_templating.fields.builtin import BUILTIN_RESOLVERS, GENERIC_FIELDS, trigger_fields
from workflow_templating.fields.discriminants import ActionKind, normalize_discriminant
from workflow_templating.registry.action_registry import ActionRegistry, action_registry
from workflow_templating.schema.flatten import flatten_schema
from workflow_templating.schema.jsonschema_adapter import schema_fields_from_json_schema
from workflow_templating.schema.models import FieldDescriptor, WorkflowNode

logger = get_logger(__name__)


def resolve_fields(
    node: WorkflowNode, registry: Optional[ActionRegistry] = None
) -> List[FieldDescriptor]:
    registry = registry if registry is not None else action_registry
    fields = _resolve(node, registry)
    return _unique(fields) or list(GENERIC_FIELDS)


def _resolve(node: WorkflowNode, registry: ActionRegistry) -> List[FieldDescriptor]:
    if node.is_trigger:
        return trigger_fields(node)

    discriminant = node.action_type
    kind = normalize_discriminant(discriminant)
    if kind is not ActionKind.UNKNOWN:
        return BUILTIN_RESOLVERS[kind](node)

    registered = _registry_fields(discriminant, registry)
    if registered:
        return registered

    if discriminant:
        logger.debug("Node %s: no output schema known for '%s'", node.id, discriminant)
    return list(GENERIC_FIELDS)


def _registry_fields(
    discriminant: Optional[str], registry: ActionRegistry
) -> List[FieldDescriptor]:
    action = registry.lookup(discriminant)
    if action is None:
        return []
    if action.output_fields:
        return list(action.output_fields)
    if action.output_schema:
        return flatten_schema(schema_fields_from_json_schema(action.output_schema))
    return []


def _unique(fields: Iterable[FieldDescriptor]) -> List[FieldDescriptor]:
    seen: set[str] = set()
    ordered: List[FieldDescriptor] = []
    for descriptor in fields:
        if not descriptor.field.strip() or descriptor.field in seen:
            continue
        seen.add(descriptor.field)
        ordered.append(descriptor)
    return ordered
