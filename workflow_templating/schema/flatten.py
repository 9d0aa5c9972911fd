"""
Flatten declared schema trees into dotted-path field descriptors.

Output order is depth-first: a parent entry precedes its children, siblings
keep declaration order. Arrays of objects expose their element fields under a
fixed ``[0]`` index (``items[0].sku``).
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set

from shared.config import config
from shared.logger import get_logger
from workflow_templating.schema.models import FieldDescriptor, FieldType, SchemaField

logger = get_logger(__name__)


def describe_field(field: SchemaField) -> str:
    if field.description:
        return field.description
    return field.type_label


def flatten_schema(
    fields: Sequence[SchemaField],
    prefix: str = "",
    *,
    max_depth: Optional[int] = None,
) -> List[FieldDescriptor]:
    """
    Flatten ``fields`` into ``FieldDescriptor`` entries.

    Nesting deeper than ``max_depth`` (default ``config.max_schema_depth``) is
    truncated, and a field that reappears inside its own subtree is emitted but
    not expanded again. Both cases log a warning instead of raising.
    """

    limit = max_depth if max_depth is not None else config.max_schema_depth
    result: List[FieldDescriptor] = []
    _flatten_into(result, fields, prefix, depth=0, limit=limit, active=set())
    return result


def _flatten_into(
    result: List[FieldDescriptor],
    fields: Sequence[SchemaField],
    prefix: str,
    *,
    depth: int,
    limit: int,
    active: Set[int],
) -> None:
    for field in fields:
        name = field.name.strip()
        if not name:
            continue
        path = f"{prefix}.{name}" if prefix else name
        result.append(FieldDescriptor(field=path, description=describe_field(field)))

        child_prefix = _child_prefix(field, path)
        if child_prefix is None:
            continue

        if id(field) in active:
            logger.warning("Schema field '%s' contains itself; not expanding it again", path)
            continue
        if depth + 1 >= limit:
            logger.warning(
                "Schema nesting under '%s' exceeds depth %d; truncating", path, limit
            )
            continue

        active.add(id(field))
        try:
            _flatten_into(
                result,
                field.fields or [],
                child_prefix,
                depth=depth + 1,
                limit=limit,
                active=active,
            )
        finally:
            active.discard(id(field))


def _child_prefix(field: SchemaField, path: str) -> Optional[str]:
    if not field.fields:
        return None
    if field.type == FieldType.object:
        return path
    if field.type == FieldType.array and field.item_type == FieldType.object:
        return f"{path}[0]"
    return None
