from __future__ import annotations

from typing import Optional

from workflow_templating.editor.insertion import insert_at_cursor, insert_at_drop, insert_token, splice


class FakeHost:
    def __init__(self, text: str, cursor: int) -> None:
        self.text = text
        self.cursor = cursor
        self.focused = False

    def cursor_offset(self) -> int:
        return self.cursor

    def offset_at_point(self, x: float, y: float) -> Optional[int]:
        # one character per 10px on a single line
        if y < 0 or y > 20:
            return None
        return min(int(x // 10), len(self.text))

    def insert_at(self, offset: int, text: str) -> None:
        self.text = self.text[:offset] + text + self.text[offset:]

    def set_cursor(self, offset: int) -> None:
        self.cursor = offset

    def focus(self) -> None:
        self.focused = True


TOKEN = "{{@n1:Fetch User.user.id}}"


def test_insert_token_is_a_pure_splice() -> None:
    assert insert_token("id=", 3, TOKEN) == f"id={TOKEN}"
    assert insert_token("ab", 1, "{{@x:Y}}") == "a{{@x:Y}}b"
    assert insert_token("", 0, TOKEN) == TOKEN


def test_insert_token_clamps_position() -> None:
    assert insert_token("ab", 99, "X") == "abX"
    assert insert_token("ab", -4, "X") == "Xab"


def test_splice_reports_cursor_after_token() -> None:
    result = splice("ab", 1, "XYZ")

    assert (result.text, result.cursor) == ("aXYZb", 4)


def test_insert_at_cursor_moves_caret_and_focuses() -> None:
    host = FakeHost("name: ", cursor=6)

    cursor = insert_at_cursor(host, TOKEN)

    assert host.text == f"name: {TOKEN}"
    assert cursor == host.cursor == 6 + len(TOKEN)
    assert host.focused


def test_insert_at_drop_uses_point_mapping() -> None:
    host = FakeHost("abcdef", cursor=0)

    cursor = insert_at_drop(host, (35.0, 5.0), "{{@n2:Wait}}")

    assert host.text == "abc{{@n2:Wait}}def"
    assert cursor == 3 + len("{{@n2:Wait}}")
    assert host.focused


def test_drop_outside_text_is_ignored() -> None:
    host = FakeHost("abc", cursor=1)

    assert insert_at_drop(host, (10.0, 500.0), TOKEN) is None
    assert host.text == "abc"
    assert not host.focused
