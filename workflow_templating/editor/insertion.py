"""
Splice template tokens into text, either at the caret (click to insert) or at
a drop point mapped to an offset by the host widget.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from shared.logger import get_logger

logger = get_logger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class InsertionResult:
    text: str
    cursor: int


class TextHost(Protocol):
    """What an editor widget must offer to accept token insertions."""

    def cursor_offset(self) -> int: ...

    def offset_at_point(self, x: float, y: float) -> Optional[int]: ...

    def insert_at(self, offset: int, text: str) -> None: ...

    def set_cursor(self, offset: int) -> None: ...

    def focus(self) -> None: ...


def insert_token(buffer: str, position: int, token: str) -> str:
    """Pure splice; ``position`` is clamped into the buffer. No escaping."""

    position = max(0, min(position, len(buffer)))
    return buffer[:position] + token + buffer[position:]


def splice(buffer: str, position: int, token: str) -> InsertionResult:
    position = max(0, min(position, len(buffer)))
    return InsertionResult(
        text=insert_token(buffer, position, token),
        cursor=position + len(token),
    )


def _insert_and_focus(host: TextHost, offset: int, token: str) -> int:
    host.insert_at(offset, token)
    cursor = offset + len(token)
    host.set_cursor(cursor)
    host.focus()
    return cursor


def insert_at_cursor(host: TextHost, token: str) -> int:
    """Insert at the caret; returns the new caret offset (just after the token)."""

    return _insert_and_focus(host, host.cursor_offset(), token)


def insert_at_drop(host: TextHost, point: Point, token: str) -> Optional[int]:
    """
    Insert at the offset under a drop point. Drops outside the text are
    ignored and return ``None``.
    """

    offset = host.offset_at_point(*point)
    if offset is None:
        logger.debug("Drop at %s is outside the text; ignoring", point)
        return None
    return _insert_and_focus(host, offset, token)
