"""
Pydantic models describing the workflow graph snapshot, declared output
schemas, and the template options derived from them.

Snapshots arrive from the canvas store as camelCase JSON, so every model
accepts both the camelCase alias and the snake_case field name.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnapshotModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


class FrozenModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )


# -----------------------------
# Graph
# -----------------------------
class NodeKind(str, Enum):
    trigger = "trigger"
    action = "action"


class WorkflowNode(SnapshotModel):
    """
    A single node placed on the workflow canvas.

    ``config`` is opaque: it carries the ``actionType`` / ``triggerType``
    discriminant plus node specific settings, some of which are JSON encoded
    schema descriptions or cached table column lists.
    """

    id: str = Field(min_length=1)
    kind: str = Field(default=NodeKind.action.value, alias="type")
    label: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)

    @property
    def action_type(self) -> Optional[str]:
        value = self.config.get("actionType")
        return value if isinstance(value, str) and value else None

    @property
    def trigger_type(self) -> Optional[str]:
        value = self.config.get("triggerType")
        return value if isinstance(value, str) and value else None

    @property
    def discriminant(self) -> Optional[str]:
        if self.is_trigger:
            return self.trigger_type
        return self.action_type

    @property
    def is_trigger(self) -> bool:
        return self.kind == NodeKind.trigger

    @property
    def is_action(self) -> bool:
        return self.kind == NodeKind.action


class WorkflowEdge(SnapshotModel):
    """A directed dependency: output of ``source`` is available to ``target``."""

    id: Optional[str] = None
    source: str
    target: str


class GraphSnapshot(SnapshotModel):
    """Read-only view of the canvas store handed to every resolver call."""

    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_to(self, node_id: str) -> List[WorkflowEdge]:
        return [edge for edge in self.edges if edge.target == node_id]


# -----------------------------
# Declared schemas
# -----------------------------
class FieldType(str, Enum):
    string = "string"
    number = "number"
    boolean = "boolean"
    array = "array"
    object = "object"


class SchemaField(SnapshotModel):
    """
    One declared output field. Objects (and arrays of objects) nest further
    ``SchemaField`` entries under ``fields``.
    """

    name: str
    type: FieldType
    item_type: Optional[FieldType] = Field(default=None, alias="itemType")
    fields: Optional[List["SchemaField"]] = None
    description: Optional[str] = None

    @property
    def type_label(self) -> str:
        if self.type == FieldType.array:
            item = self.item_type.value if self.item_type else "any"
            return f"{item}[]"
        return self.type.value


SchemaField.model_rebuild()


class FieldDescriptor(FrozenModel):
    """A flat, dotted-path output field as shown in the autocomplete."""

    field: str
    description: str


# -----------------------------
# Template options
# -----------------------------
class OptionKind(str, Enum):
    node = "node"
    field = "field"


class TemplateOption(FrozenModel):
    kind: OptionKind
    node_id: str = Field(alias="nodeId")
    node_name: str = Field(alias="nodeName")
    field: Optional[str] = None
    description: Optional[str] = None
    token: str

    @property
    def label(self) -> str:
        if self.field:
            return f"{self.node_name}.{self.field}"
        return self.node_name


__all__ = [
    "FieldDescriptor",
    "FieldType",
    "GraphSnapshot",
    "NodeKind",
    "OptionKind",
    "SchemaField",
    "TemplateOption",
    "WorkflowEdge",
    "WorkflowNode",
]
