"""
Detect an in-progress ``@`` reference in a text buffer and replace it with
the chosen token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from workflow_templating.editor.insertion import InsertionResult


@dataclass(frozen=True)
class CompletionContext:
    start: int  # offset of the "@"
    end: int  # cursor offset
    filter_text: str


def completion_context(text: str, cursor: int) -> Optional[CompletionContext]:
    """
    Looks back from ``cursor`` to the last ``@`` on the same line. Whitespace
    between the ``@`` and the cursor ends the reference.
    """

    cursor = max(0, min(cursor, len(text)))
    line_start = text.rfind("\n", 0, cursor) + 1
    at = text.rfind("@", line_start, cursor)
    if at == -1:
        return None
    filter_text = text[at + 1:cursor]
    if any(ch.isspace() for ch in filter_text):
        return None
    return CompletionContext(start=at, end=cursor, filter_text=filter_text)


def apply_completion(text: str, context: CompletionContext, token: str) -> InsertionResult:
    return InsertionResult(
        text=text[:context.start] + token + text[context.end:],
        cursor=context.start + len(token),
    )
