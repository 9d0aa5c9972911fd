"""
Bridge between JSON Schema documents (as declared by plugin actions) and the
``SchemaField`` trees the flattener understands.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from jsonschema.exceptions import SchemaError
from jsonschema.validators import Draft202012Validator, validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from shared.config import config
from shared.logger import get_logger
from workflow_templating.schema.models import FieldType, SchemaField

logger = get_logger(__name__)

JsonSchema = Dict[str, Any]

_SIMPLE_TYPES = {
    "string": FieldType.string,
    "number": FieldType.number,
    "integer": FieldType.number,
    "boolean": FieldType.boolean,
    "object": FieldType.object,
    "array": FieldType.array,
}


def check_schema(schema: JsonSchema) -> None:
    """
    Ensure the provided schema is itself valid JSON Schema.
    """

    validator_cls = validator_for(schema, default=Draft202012Validator)
    validator_cls.check_schema(schema)


def dereference_schema(schema: JsonSchema, *, root: Optional[JsonSchema] = None) -> JsonSchema:
    """
    Resolve a local ``$ref`` (``#/$defs/...``) against ``root``. Schemas
    without a ``$ref`` come back unchanged.
    """

    if not isinstance(schema, dict):
        return schema

    ref = schema.get("$ref")
    if not ref:
        return schema

    root_schema = root or schema
    resource = Resource.from_contents(root_schema, default_specification=DRAFT202012)
    resolver = Registry().with_resource("", resource).resolver()
    return resolver.lookup(ref).contents


def schema_fields_from_json_schema(
    schema: JsonSchema,
    *,
    max_depth: Optional[int] = None,
) -> List[SchemaField]:
    """
    Convert an object JSON Schema into ``SchemaField`` entries, one per
    declared property. Recursive ``$ref`` chains stop at ``max_depth``.
    """

    limit = max_depth if max_depth is not None else config.max_schema_depth
    try:
        check_schema(schema)
        resolved = dereference_schema(schema, root=schema)
    except (SchemaError, Unresolvable) as exc:
        logger.debug("Ignoring invalid output schema: %s", exc)
        return []
    return _properties_to_fields(resolved, root=schema, depth=0, limit=limit)


def _properties_to_fields(
    schema: JsonSchema, *, root: JsonSchema, depth: int, limit: int
) -> List[SchemaField]:
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return []

    fields: List[SchemaField] = []
    for name, prop in properties.items():
        fields.append(_property_to_field(name, prop, root=root, depth=depth, limit=limit))
    return fields


def _property_to_field(
    name: str, prop: Any, *, root: JsonSchema, depth: int, limit: int
) -> SchemaField:
    try:
        prop = dereference_schema(prop, root=root)
    except Unresolvable as exc:
        logger.debug("Unresolvable $ref under '%s': %s", name, exc)
        prop = {}
    if not isinstance(prop, dict):
        prop = {}

    field_type = _field_type(prop)
    description = prop.get("description") if isinstance(prop.get("description"), str) else None
    item_type: Optional[FieldType] = None
    nested: Optional[List[SchemaField]] = None
    expand = depth + 1 < limit

    if field_type == FieldType.object and expand:
        nested = _properties_to_fields(prop, root=root, depth=depth + 1, limit=limit) or None
    elif field_type == FieldType.array:
        items = prop.get("items")
        try:
            items = dereference_schema(items, root=root) if isinstance(items, dict) else {}
        except Unresolvable:
            items = {}
        item_type = _field_type(items) if items else None
        if item_type == FieldType.object and expand:
            nested = _properties_to_fields(items, root=root, depth=depth + 1, limit=limit) or None

    return SchemaField(
        name=name,
        type=field_type,
        item_type=item_type,
        fields=nested,
        description=description,
    )


def _field_type(schema: JsonSchema) -> FieldType:
    declared = schema.get("type")
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    if isinstance(declared, str) and declared in _SIMPLE_TYPES:
        return _SIMPLE_TYPES[declared]
    if "properties" in schema:
        return FieldType.object
    if "items" in schema:
        return FieldType.array
    return FieldType.string


__all__ = [
    "SchemaError",
    "check_schema",
    "dereference_schema",
    "schema_fields_from_json_schema",
]
