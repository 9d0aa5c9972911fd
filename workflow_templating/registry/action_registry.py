"""
In-memory registry of plugin actions and the output fields they declare.

The field resolver consults this registry for discriminants it has no
built-in schema for, and the display-name resolver uses it for labels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, MutableMapping, Optional, Sequence

from workflow_templating.errors import ActionNotFoundError
from workflow_templating.schema.jsonschema_adapter import JsonSchema
from workflow_templating.schema.models import FieldDescriptor


@dataclass
class ActionDefinition:
    id: str
    label: str
    integration: str = ""
    description: Optional[str] = None
    output_fields: List[FieldDescriptor] = field(default_factory=list)
    output_schema: Optional[JsonSchema] = None


class ActionRegistry:
    """Stores plugin action definitions keyed by their namespaced id."""

    def __init__(self, initial: MutableMapping[str, ActionDefinition] | None = None) -> None:
        self._actions: Dict[str, ActionDefinition] = dict(initial or {})

    def register(self, action: ActionDefinition) -> None:
        self._actions[action.id] = action

    def get(self, action_id: str) -> ActionDefinition:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise ActionNotFoundError(f"Action '{action_id}' is not registered") from exc

    def maybe_get(self, action_id: str) -> Optional[ActionDefinition]:
        return self._actions.get(action_id)

    def lookup(self, discriminant: Optional[str]) -> Optional[ActionDefinition]:
        """
        Find an action by id, falling back to its label (older node configs
        stored the label rather than the id).
        """

        if not discriminant:
            return None
        action = self._actions.get(discriminant)
        if action is not None:
            return action
        for candidate in self._actions.values():
            if candidate.label == discriminant:
                return candidate
        return None

    def all(self) -> List[ActionDefinition]:
        return list(self._actions.values())


def _fields(*pairs: Sequence[str]) -> List[FieldDescriptor]:
    return [FieldDescriptor(field=name, description=description) for name, description in pairs]


def _register_builtin_actions(registry: ActionRegistry) -> None:
    database = [
        ("get-row", "Get Row", "Fetch a single row from a table by column value",
         _fields(("row", "The matched row object"), ("found", "Whether a row was found (true/false)"))),
        ("get-many", "Get Many", "Query multiple rows with filters, ordering, and limits",
         _fields(("rows", "Array of matching rows"), ("count", "Number of rows returned"))),
        ("select", "Select Rows", "Select rows from a table",
         _fields(("rows", "Array of matching rows"), ("count", "Number of rows returned"))),
        ("insert", "Insert Row", "Insert a new row into a table",
         _fields(("row", "The inserted row"), ("id", "ID of the inserted row"))),
        ("update", "Update Rows", "Update rows matching a filter",
         _fields(("rows", "The updated rows"), ("count", "Number of rows updated"))),
        ("delete", "Delete Rows", "Delete rows matching a filter",
         _fields(("count", "Number of rows deleted"))),
        ("rpc", "Call Function", "Call a database function",
         _fields(("result", "Function return value"))),
        ("raw-sql", "Raw SQL", "Run a SQL query",
         _fields(("rows", "Query result rows"), ("count", "Number of rows returned"))),
        ("storage", "Storage", "List, upload, download, or remove stored files",
         _fields(("result", "Operation result (URL, file list, or confirmation)"))),
        ("edge-function", "Edge Function", "Invoke a deployed edge function",
         _fields(("data", "Function response data"), ("status", "HTTP status code"))),
    ]
    for slug, label, description, output_fields in database:
        registry.register(
            ActionDefinition(
                id=f"supabase/{slug}",
                label=label,
                integration="supabase",
                description=description,
                output_fields=output_fields,
            )
        )

    registry.register(
        ActionDefinition(
            id="ai-gateway/generate-text",
            label="Generate Text",
            integration="ai-gateway",
            description="Generate text or a structured object with a language model",
            output_fields=_fields(("text", "Generated text")),
        )
    )


action_registry = ActionRegistry()
_register_builtin_actions(action_registry)


__all__ = ["ActionDefinition", "ActionRegistry", "action_registry"]
