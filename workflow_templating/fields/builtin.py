"""
Built-in output schemas, one resolver per ``ActionKind``.

Kinds that can carry a declared schema on their config (Database Query,
Generate Text, the row readers) try that first and fall back to their fixed
fields when it is missing or malformed.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from shared.logger import get_logger
from workflow_templating.errors import SchemaDecodeError
from workflow_templating.fields.discriminants import ActionKind
from workflow_templating.schema.flatten import flatten_schema
from workflow_templating.schema.models import FieldDescriptor, WorkflowNode
from workflow_templating.schema.parse import parse_schema_fields, parse_set_field_rows

logger = get_logger(__name__)

FieldResolver = Callable[[WorkflowNode], List[FieldDescriptor]]


def _fields(*pairs: Tuple[str, str]) -> List[FieldDescriptor]:
    return [FieldDescriptor(field=name, description=description) for name, description in pairs]


STATIC_FIELDS: Dict[ActionKind, Sequence[Tuple[str, str]]] = {
    ActionKind.HTTP_REQUEST: (
        ("data", "Response data"),
        ("status", "HTTP status code"),
    ),
    ActionKind.MERGE: (
        ("items", "Array of merged items"),
        ("count", "Number of merged items"),
    ),
    ActionKind.SORT: (
        ("items", "Array of sorted items"),
        ("count", "Number of items"),
    ),
    ActionKind.REMOVE_DUPLICATES: (
        ("items", "Array of unique items"),
        ("count", "Number of unique items"),
        ("removedCount", "Number of duplicates removed"),
    ),
    ActionKind.LOOP_OVER_BATCHES: (
        ("items", "Current batch of items"),
        ("batchIndex", "Current batch index (0-based)"),
        ("totalBatches", "Total number of batches"),
        ("done", "Whether all batches are processed"),
    ),
    ActionKind.SPLIT_OUT: (
        ("items", "Array of individual items from the split"),
        ("count", "Number of items produced"),
    ),
    ActionKind.LIMIT: (
        ("items", "Limited array of items"),
        ("count", "Number of items returned"),
        ("originalCount", "Original item count before limit"),
    ),
    ActionKind.AGGREGATE: (
        ("result", "Aggregation result (number)"),
        ("operation", "Operation performed"),
        ("field", "Field aggregated on"),
        ("count", "Number of values processed"),
        ("groups", "Grouped items (for Group By)"),
        ("groupCount", "Number of groups (for Group By)"),
    ),
    ActionKind.SWITCH: (
        ("matchedOutput", "Name of the matched output branch"),
        ("value", "The value that was evaluated"),
    ),
    ActionKind.FILTER: (
        ("items", "Array of items that passed the filter (kept)"),
        ("rejectedItems", "Array of items that did not match (rejected)"),
        ("keptCount", "Number of items kept"),
        ("removedCount", "Number of items removed"),
    ),
    ActionKind.DATE_TIME: (
        ("result", "The date operation result (string, number, or boolean)"),
        ("original", "The original date value (ISO string)"),
    ),
    ActionKind.CODE: (
        ("items", "Array of output items [{json: {...}}]"),
        ("items[0].json", "First item's data object"),
        ("logs", "Captured console.log output"),
    ),
    ActionKind.WAIT: (
        ("waited", "Whether the wait completed (true)"),
        ("duration", "Actual wait duration in ms"),
    ),
}

TRIGGER_FIELDS = _fields(
    ("triggered", "Trigger status"),
    ("timestamp", "Trigger timestamp"),
    ("input", "Input data"),
)

GENERIC_FIELDS = _fields(("data", "Output data"))


def declared_fields(
    node: WorkflowNode, config_key: str, prefix: str = ""
) -> Optional[List[FieldDescriptor]]:
    """
    Flatten the JSON schema stored under ``config_key``. Returns ``None`` when
    the key is absent, the schema is empty, or it fails to decode.
    """

    raw = node.config.get(config_key)
    if not raw:
        return None
    try:
        schema = parse_schema_fields(raw)
    except SchemaDecodeError as exc:
        logger.debug("Node %s: ignoring %s (%s)", node.id, config_key, exc)
        return None
    if not schema:
        return None
    return flatten_schema(schema, prefix) or None


def _table_column_fields(node: WorkflowNode, prefix: str) -> List[FieldDescriptor]:
    columns = node.config.get("_tableColumns")
    if not isinstance(columns, list):
        return []
    fields: List[FieldDescriptor] = []
    for column in columns:
        if not isinstance(column, dict):
            continue
        name = column.get("name")
        if not isinstance(name, str) or not name:
            continue
        fields.append(
            FieldDescriptor(field=f"{prefix}.{name}", description=f"{column.get('type') or 'unknown'} column")
        )
    return fields


def _row_reader(base: Sequence[Tuple[str, str]], prefix: str) -> FieldResolver:
    def resolve(node: WorkflowNode) -> List[FieldDescriptor]:
        fields = _fields(*base)
        declared = declared_fields(node, "outputSchema", prefix)
        if declared:
            return fields + declared
        return fields + _table_column_fields(node, prefix)

    return resolve


def _database_query(node: WorkflowNode) -> List[FieldDescriptor]:
    return declared_fields(node, "dbSchema") or _fields(
        ("rows", "Query result rows"),
        ("count", "Number of rows"),
    )


def _generate_text(node: WorkflowNode) -> List[FieldDescriptor]:
    if node.config.get("aiFormat") == "object":
        declared = declared_fields(node, "aiSchema", "object")
        if declared:
            return declared
    return _fields(("text", "Generated text"))


def _set_fields(node: WorkflowNode) -> List[FieldDescriptor]:
    raw = node.config.get("fields")
    if raw:
        try:
            rows = parse_set_field_rows(raw)
        except SchemaDecodeError as exc:
            logger.debug("Node %s: ignoring Set Fields rows (%s)", node.id, exc)
            rows = []
        if rows:
            return [
                FieldDescriptor(field=row["name"], description=f"{row['type'] or 'any'} field")
                for row in rows
            ]
    return _fields(("output", "Set Fields output object"))


def _static(kind: ActionKind) -> FieldResolver:
    pairs = STATIC_FIELDS[kind]

    def resolve(node: WorkflowNode) -> List[FieldDescriptor]:
        return _fields(*pairs)

    return resolve


BUILTIN_RESOLVERS: Dict[ActionKind, FieldResolver] = {
    kind: _static(kind) for kind in STATIC_FIELDS
}
BUILTIN_RESOLVERS.update(
    {
        ActionKind.DATABASE_QUERY: _database_query,
        ActionKind.GENERATE_TEXT: _generate_text,
        ActionKind.GET_ROW: _row_reader(
            (("row", "The matched row object"), ("found", "Whether a row was found (true/false)")),
            "row",
        ),
        ActionKind.GET_MANY: _row_reader(
            (("rows", "Array of matching rows"), ("count", "Number of rows returned")),
            "rows[0]",
        ),
        ActionKind.SELECT_ROWS: _row_reader(
            (("rows", "Array of matching rows"), ("count", "Number of rows returned")),
            "rows[0]",
        ),
        ActionKind.SET_FIELDS: _set_fields,
    }
)


def trigger_fields(node: WorkflowNode) -> List[FieldDescriptor]:
    if node.trigger_type == "Webhook":
        declared = declared_fields(node, "webhookSchema")
        if declared:
            return declared
    return list(TRIGGER_FIELDS)
