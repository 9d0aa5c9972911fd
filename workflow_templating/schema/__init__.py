from workflow_templating.schema.flatten import flatten_schema
from workflow_templating.schema.models import (
    FieldDescriptor,
    FieldType,
    GraphSnapshot,
    NodeKind,
    OptionKind,
    SchemaField,
    TemplateOption,
    WorkflowEdge,
    WorkflowNode,
)
from workflow_templating.schema.parse import parse_schema_fields, parse_set_field_rows

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
    "flatten_schema",
    "parse_schema_fields",
    "parse_set_field_rows",
]
