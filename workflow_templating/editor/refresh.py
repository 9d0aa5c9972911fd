"""
Guard asynchronous node-config population (e.g. refreshing a table's
columns) against stale responses.

Each node id carries a monotonically increasing generation. A response is
applied only if no newer request for the same node has started since.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, TypeVar

from shared.logger import get_logger
from workflow_templating.schema.models import FieldType

logger = get_logger(__name__)

T = TypeVar("T")

_NUMBER_TYPES = {
    "integer", "int", "int2", "int4", "int8", "bigint", "smallint",
    "numeric", "decimal", "real", "float4", "float8", "double precision",
    "serial", "bigserial",
}


class ConfigRefreshCoordinator:
    def __init__(self) -> None:
        self._generations: Dict[str, int] = {}

    def begin(self, node_id: str) -> int:
        generation = self._generations.get(node_id, 0) + 1
        self._generations[node_id] = generation
        return generation

    def cancel(self, node_id: str) -> None:
        """Invalidate any in-flight request for ``node_id``."""
        self.begin(node_id)

    def is_current(self, node_id: str, generation: int) -> bool:
        return self._generations.get(node_id) == generation

    def apply(self, node_id: str, generation: int, mutate: Callable[[], None]) -> bool:
        if not self.is_current(node_id, generation):
            logger.info(
                "Dropping stale config refresh for node %s (generation %d, current %d)",
                node_id,
                generation,
                self._generations.get(node_id, 0),
            )
            return False
        mutate()
        return True

    async def refresh(
        self,
        node_id: str,
        fetch: Callable[[], Awaitable[T]],
        mutate: Callable[[T], None],
    ) -> bool:
        """Start a request, await ``fetch`` and apply its result if still current."""

        generation = self.begin(node_id)
        result = await fetch()
        return self.apply(node_id, generation, lambda: mutate(result))


def map_postgres_type(pg_type: str) -> FieldType:
    t = pg_type.strip().lower()
    if t in ("boolean", "bool"):
        return FieldType.boolean
    if t in _NUMBER_TYPES:
        return FieldType.number
    if t in ("json", "jsonb"):
        return FieldType.object
    if t.startswith("_") or "[]" in t or t == "array":
        return FieldType.array
    # uuid, text, varchar, timestamps, dates ...
    return FieldType.string


def columns_to_schema_json(columns: Iterable[Mapping[str, Any]]) -> str:
    """Encode fetched ``{name, type}`` column rows as an ``outputSchema`` string."""

    schema = []
    for column in columns:
        name = column.get("name")
        if not isinstance(name, str) or not name:
            continue
        pg_type = str(column.get("type") or "text")
        schema.append(
            {"name": name, "type": map_postgres_type(pg_type).value, "description": pg_type}
        )
    return json.dumps(schema)
