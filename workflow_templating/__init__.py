"""
Public entrypoint for analysing workflow graphs and building the
``{{@id:name.field}}`` template options offered to node editors.
"""

from __future__ import annotations

from typing import List, Optional

from workflow_templating.autocomplete.state import AutocompleteState, Key, filter_options
from workflow_templating.autocomplete.trigger import apply_completion, completion_context
from workflow_templating.editor.insertion import insert_at_cursor, insert_at_drop, insert_token
from workflow_templating.editor.refresh import ConfigRefreshCoordinator
from workflow_templating.expr.tokens import encode_token, find_tokens, parse_token
from workflow_templating.fields.display import display_name
from workflow_templating.fields.resolver import resolve_fields
from workflow_templating.graph.ancestors import upstream_nodes
from workflow_templating.options.builder import (
    build_field_groups,
    build_template_options,
    describe_upstream_context,
    filter_field_groups,
)
from workflow_templating.registry.action_registry import ActionRegistry, action_registry
from workflow_templating.schema.flatten import flatten_schema
from workflow_templating.schema.models import GraphSnapshot, TemplateOption


def template_options_for(
    snapshot: GraphSnapshot,
    target_id: str,
    *,
    registry: Optional[ActionRegistry] = None,
) -> List[TemplateOption]:
    """
    Build the template options for ``target_id`` from a fresh graph snapshot.
    """

    return build_template_options(target_id, snapshot.nodes, snapshot.edges, registry=registry)


__all__ = [
    "ActionRegistry",
    "AutocompleteState",
    "ConfigRefreshCoordinator",
    "GraphSnapshot",
    "Key",
    "TemplateOption",
    "action_registry",
    "apply_completion",
    "build_field_groups",
    "build_template_options",
    "completion_context",
    "describe_upstream_context",
    "display_name",
    "encode_token",
    "filter_field_groups",
    "filter_options",
    "find_tokens",
    "flatten_schema",
    "insert_at_cursor",
    "insert_at_drop",
    "insert_token",
    "parse_token",
    "resolve_fields",
    "template_options_for",
    "upstream_nodes",
]
