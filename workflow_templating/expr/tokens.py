"""
Encoding, decoding and scanning of ``{{@<nodeId>:<nodeName>.<fieldPath>}}``
template tokens.

``nodeId`` is authoritative; ``nodeName`` is embedded for readability only.
Decoding therefore works by position: the id runs up to the first ``:``, and
the field path starts after the name. Names may themselves contain ``.``, so
callers that know the current display names should pass them as
``known_names`` for an exact split.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Iterator, List, Mapping, Optional

from workflow_templating.errors import TokenParseError

TOKEN_PATTERN = re.compile(r"\{\{@([^{}]+)\}\}")


@dataclass(frozen=True)
class TemplateToken:
    raw: str
    node_id: str
    node_name: str
    field: Optional[str] = None


@dataclass(frozen=True)
class TokenSpan:
    start: int
    end: int
    raw: str


@dataclass(frozen=True)
class TemplateLiteral:
    text: str


@dataclass(frozen=True)
class TemplateReference:
    span: TokenSpan
    token: TemplateToken


TemplatePart = TemplateLiteral | TemplateReference


def encode_token(node_id: str, node_name: str, field: Optional[str] = None) -> str:
    if field is not None:
        if not field.strip():
            raise TokenParseError(f"Token for node '{node_id}' has an empty field path")
        return f"{{{{@{node_id}:{node_name}.{field}}}}}"
    return f"{{{{@{node_id}:{node_name}}}}}"


def parse_token(text: str, known_names: Optional[Mapping[str, str]] = None) -> TemplateToken:
    match = TOKEN_PATTERN.fullmatch(text)
    if match is None:
        raise TokenParseError(f"'{text}' is not a {{{{@id:name}}}} token")
    return _decode_body(text, match.group(1), known_names)


def _decode_body(
    raw: str, body: str, known_names: Optional[Mapping[str, str]]
) -> TemplateToken:
    node_id, sep, rest = body.partition(":")
    if not sep or not node_id:
        raise TokenParseError(f"Token '{raw}' is missing its node id")
    if not rest:
        raise TokenParseError(f"Token '{raw}' is missing its node name")

    known = (known_names or {}).get(node_id)
    if known and rest.startswith(known):
        remainder = rest[len(known):]
        if not remainder:
            return TemplateToken(raw=raw, node_id=node_id, node_name=known)
        if remainder.startswith("."):
            return _with_field(raw, node_id, known, remainder[1:])

    name, dot, field = rest.partition(".")
    if not dot:
        return TemplateToken(raw=raw, node_id=node_id, node_name=name)
    return _with_field(raw, node_id, name, field)


def _with_field(raw: str, node_id: str, name: str, field: str) -> TemplateToken:
    if not field:
        raise TokenParseError(f"Token '{raw}' has an empty field path")
    return TemplateToken(raw=raw, node_id=node_id, node_name=name, field=field)


def find_tokens(text: str) -> List[TokenSpan]:
    """Offsets of every token-shaped substring, for highlighting."""

    return [
        TokenSpan(start=match.start(), end=match.end(), raw=match.group(0))
        for match in TOKEN_PATTERN.finditer(text)
    ]


def parse_template(
    text: str, known_names: Optional[Mapping[str, str]] = None
) -> List[TemplatePart]:
    parts: List[TemplatePart] = []
    cursor = 0
    for match in TOKEN_PATTERN.finditer(text):
        start, end = match.span()
        if start > cursor:
            parts.append(TemplateLiteral(text[cursor:start]))
        span = TokenSpan(start=start, end=end, raw=match.group(0))
        parts.append(
            TemplateReference(span=span, token=_decode_body(span.raw, match.group(1), known_names))
        )
        cursor = end
    if cursor < len(text):
        parts.append(TemplateLiteral(text[cursor:]))
    if not parts:
        parts.append(TemplateLiteral(text))
    return parts


def iterate_value_tokens(value: Any) -> Iterator[TokenSpan]:
    """Walk strings nested anywhere inside a node config value."""

    if isinstance(value, str):
        yield from find_tokens(value)
        return
    if isinstance(value, list):
        for item in value:
            yield from iterate_value_tokens(item)
        return
    if isinstance(value, dict):
        for item in value.values():
            yield from iterate_value_tokens(item)


def referenced_node_ids(value: Any) -> List[str]:
    """
    Node ids referenced by tokens in ``value``, in discovery order without
    duplicates. Token-shaped text without an id is skipped.
    """

    seen: set[str] = set()
    ordered: List[str] = []
    for span in iterate_value_tokens(value):
        node_id, sep, _ = span.raw[3:-2].partition(":")
        if not sep or not node_id or node_id in seen:
            continue
        seen.add(node_id)
        ordered.append(node_id)
    return ordered
