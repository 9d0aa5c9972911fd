from __future__ import annotations

import json
import logging

import pytest

from workflow_templating.errors import SchemaDecodeError
from workflow_templating.fields.resolver import resolve_fields
from workflow_templating.schema.flatten import flatten_schema
from workflow_templating.schema.models import SchemaField, WorkflowNode
from workflow_templating.schema.parse import (
    MAX_JSON_NESTING,
    json_nesting_depth,
    parse_schema_fields,
    parse_set_field_rows,
)


def _paths(fields) -> list[str]:
    return [entry.field for entry in fields]


def test_object_fields_follow_parent() -> None:
    schema = parse_schema_fields(
        [
            {
                "name": "user",
                "type": "object",
                "fields": [
                    {"name": "id", "type": "string"},
                    {"name": "age", "type": "number"},
                ],
            }
        ]
    )

    result = flatten_schema(schema)

    assert [(entry.field, entry.description) for entry in result] == [
        ("user", "object"),
        ("user.id", "string"),
        ("user.age", "number"),
    ]


def test_array_of_objects_uses_first_element_index() -> None:
    schema = parse_schema_fields(
        '[{"name": "items", "type": "array", "itemType": "object",'
        ' "fields": [{"name": "sku", "type": "string"}]}]'
    )

    result = flatten_schema(schema)

    assert _paths(result) == ["items", "items[0].sku"]
    assert result[0].description == "object[]"


def test_explicit_description_wins_and_prefix_applies() -> None:
    schema = [
        SchemaField(name="summary", type="string", description="Short summary"),
        SchemaField(name="tags", type="array", item_type="string"),
    ]

    result = flatten_schema(schema, "object")

    assert [(entry.field, entry.description) for entry in result] == [
        ("object.summary", "Short summary"),
        ("object.tags", "string[]"),
    ]


def test_array_of_scalars_does_not_expand_children() -> None:
    schema = [
        SchemaField(
            name="ids",
            type="array",
            item_type="string",
            fields=[SchemaField(name="ignored", type="string")],
        )
    ]

    assert _paths(flatten_schema(schema)) == ["ids"]


def _nested_chain(levels: int) -> dict:
    leaf: dict = {"name": f"level{levels - 1}", "type": "string"}
    for index in range(levels - 2, -1, -1):
        leaf = {"name": f"level{index}", "type": "object", "fields": [leaf]}
    return leaf


def test_depth_limit_truncates_expansion(caplog: pytest.LogCaptureFixture) -> None:
    schema = parse_schema_fields([_nested_chain(40)])
    flatten_logger = logging.getLogger("workflow_templating.schema.flatten")
    flatten_logger.addHandler(caplog.handler)

    try:
        with caplog.at_level(logging.WARNING, logger=flatten_logger.name):
            limited = flatten_schema(schema, max_depth=3)
    finally:
        flatten_logger.removeHandler(caplog.handler)

    assert _paths(limited) == ["level0", "level0.level1", "level0.level1.level2"]
    assert "exceeds depth" in caplog.text
    assert len(flatten_schema(schema, max_depth=32)) == 32


def test_self_referencing_field_is_not_expanded_twice() -> None:
    node = SchemaField(name="node", type="object", fields=[SchemaField(name="x", type="string")])
    node.fields.append(node)

    result = flatten_schema([node])

    assert _paths(result) == ["node", "node.x", "node.node"]


def test_malformed_schema_json_raises_decode_error() -> None:
    with pytest.raises(SchemaDecodeError):
        parse_schema_fields("{not json")

    with pytest.raises(SchemaDecodeError):
        parse_schema_fields('{"name": "user"}')

    with pytest.raises(SchemaDecodeError):
        parse_schema_fields('[{"name": "user", "type": "date"}]')


def test_set_field_rows_drop_blank_names() -> None:
    rows = parse_set_field_rows(
        '[{"name": " total ", "type": "number"}, {"name": "   ", "type": "string"},'
        ' {"type": "boolean"}, "junk", {"name": 5}]'
    )

    assert rows == [{"name": "total", "type": "number"}]


def test_blank_field_names_are_skipped() -> None:
    schema = parse_schema_fields(
        [
            {"name": "", "type": "string"},
            {"name": "  ", "type": "number"},
            {
                "name": "user",
                "type": "object",
                "fields": [{"name": "", "type": "string"}, {"name": "id", "type": "string"}],
            },
        ]
    )

    assert _paths(flatten_schema(schema)) == ["user", "user.id"]


def test_nesting_depth_ignores_brackets_inside_strings() -> None:
    assert json_nesting_depth('[{"name": "[[{{", "type": "string"}]') == 2
    assert json_nesting_depth('"escaped \\" [["') == 0


def test_overly_nested_schema_json_is_rejected_before_decoding() -> None:
    levels = MAX_JSON_NESTING // 2 + 10
    raw = json.dumps([_nested_chain(levels)])

    with pytest.raises(SchemaDecodeError, match="nested deeper"):
        parse_schema_fields(raw)

    node = WorkflowNode(id="q", kind="action", config={"actionType": "Database Query", "dbSchema": raw})
    assert _paths(resolve_fields(node)) == ["rows", "count"]
