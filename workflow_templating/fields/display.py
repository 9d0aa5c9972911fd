"""
Human readable labels for workflow nodes.
"""

from __future__ import annotations

from typing import Optional

from shared.config import config
from workflow_templating.registry.action_registry import ActionRegistry, action_registry
from workflow_templating.schema.models import WorkflowNode


def display_name(node: WorkflowNode, registry: Optional[ActionRegistry] = None) -> str:
    """
    Label priority: user label, then for actions the registry label of the
    discriminant (or the raw discriminant), then for triggers the trigger
    type. Never returns an empty string.
    """

    if node.label and node.label.strip():
        return node.label

    if node.is_action:
        registry = registry if registry is not None else action_registry
        discriminant = node.action_type
        action = registry.lookup(discriminant)
        if action is not None and action.label:
            return action.label
        return discriminant or config.default_action_label

    if node.is_trigger:
        return node.trigger_type or config.default_trigger_label

    return config.fallback_node_label
