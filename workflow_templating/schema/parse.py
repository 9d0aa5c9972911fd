"""
Decode JSON encoded schema descriptions stored on node configs.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping

from pydantic import TypeAdapter, ValidationError

from workflow_templating.errors import SchemaDecodeError
from workflow_templating.schema.models import SchemaField

_SCHEMA_FIELDS = TypeAdapter(List[SchemaField])

# One schema level is two JSON levels ("[{"), so this admits 200 schema levels.
MAX_JSON_NESTING = 400


def json_nesting_depth(text: str) -> int:
    """Deepest ``[``/``{`` nesting in ``text``, ignoring brackets inside strings."""

    depth = deepest = 0
    in_string = escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "[{":
            depth += 1
            deepest = max(deepest, depth)
        elif char in "]}":
            depth -= 1
    return deepest


def _decode_json(raw: Any, *, what: str) -> Any:
    if not isinstance(raw, str):
        return raw
    if json_nesting_depth(raw) > MAX_JSON_NESTING:
        raise SchemaDecodeError(
            f"{what} JSON is nested deeper than {MAX_JSON_NESTING} levels"
        )
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise SchemaDecodeError(f"Invalid {what} JSON: {exc}") from exc


def parse_schema_fields(raw: Any) -> List[SchemaField]:
    """
    Accepts either a JSON string or an already decoded list and returns the
    validated ``SchemaField`` entries.
    """

    data = _decode_json(raw, what="schema")
    if not isinstance(data, list):
        raise SchemaDecodeError(
            f"Schema must be a list of fields, received {type(data).__name__}"
        )
    try:
        return _SCHEMA_FIELDS.validate_python(data)
    except (ValidationError, RecursionError) as exc:
        raise SchemaDecodeError(f"Schema validation failed: {exc}") from exc


def parse_set_field_rows(raw: Any) -> List[Mapping[str, Any]]:
    """
    Decode the user-defined ``{name, type}`` rows of a Set Fields node.

    Rows without a non-blank string ``name`` are dropped; names come back
    stripped.
    """

    data = _decode_json(raw, what="Set Fields")
    if not isinstance(data, list):
        raise SchemaDecodeError(
            f"Set Fields rows must be a list, received {type(data).__name__}"
        )

    rows: List[Mapping[str, Any]] = []
    for row in data:
        if not isinstance(row, Mapping):
            continue
        name = row.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        rows.append({"name": name.strip(), "type": row.get("type")})
    return rows
