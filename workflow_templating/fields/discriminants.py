"""
Closed set of built-in action discriminants.

Node configs store the discriminant as a free-form string: either the
built-in label ("Get Row") or a namespaced plugin id ("supabase/get-row").
``normalize_discriminant`` folds both spellings into one ``ActionKind`` so the
resolver tables never compare raw strings.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, FrozenSet, Optional


class ActionKind(str, Enum):
    HTTP_REQUEST = "HTTP Request"
    DATABASE_QUERY = "Database Query"
    GENERATE_TEXT = "Generate Text"
    GET_ROW = "Get Row"
    GET_MANY = "Get Many"
    SELECT_ROWS = "Select Rows"
    MERGE = "Merge"
    SORT = "Sort"
    REMOVE_DUPLICATES = "Remove Duplicates"
    LOOP_OVER_BATCHES = "Loop Over Batches"
    SPLIT_OUT = "Split Out"
    LIMIT = "Limit"
    AGGREGATE = "Aggregate"
    SWITCH = "Switch"
    FILTER = "Filter"
    DATE_TIME = "DateTime"
    CODE = "Code"
    WAIT = "Wait"
    SET_FIELDS = "Set Fields"
    UNKNOWN = "__unknown__"


# Kinds that plugins also ship under a namespaced id.
_NAMESPACED_IDS: Dict[ActionKind, FrozenSet[str]] = {
    ActionKind.GENERATE_TEXT: frozenset({"ai-gateway/generate-text"}),
    ActionKind.GET_ROW: frozenset({"supabase/get-row"}),
    ActionKind.GET_MANY: frozenset({"supabase/get-many"}),
    ActionKind.SELECT_ROWS: frozenset({"supabase/select"}),
}

_BY_VALUE: Dict[str, ActionKind] = {
    kind.value: kind for kind in ActionKind if kind is not ActionKind.UNKNOWN
}


def kebab_case(label: str) -> str:
    return re.sub(r"\s+", "-", label.strip().lower())


def normalize_discriminant(raw: Optional[str]) -> ActionKind:
    if not raw:
        return ActionKind.UNKNOWN

    kind = _BY_VALUE.get(raw)
    if kind is not None:
        return kind

    if "/" not in raw:
        return ActionKind.UNKNOWN

    for kind, ids in _NAMESPACED_IDS.items():
        if raw in ids or raw.endswith(f"/{kebab_case(kind.value)}"):
            return kind
    return ActionKind.UNKNOWN
