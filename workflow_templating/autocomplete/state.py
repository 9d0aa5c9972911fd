"""
Selection state machine behind the template autocomplete popup.

The popup is ``Closed`` or ``Open``; while open it tracks the filter text and a
single ``selected_index`` shared by keyboard navigation and mouse hover.
Rendering is left to the host; nothing here touches a UI toolkit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from workflow_templating.options.builder import build_template_options
from workflow_templating.registry.action_registry import ActionRegistry
from workflow_templating.schema.models import GraphSnapshot, TemplateOption

Listener = Callable[["AutocompleteState"], None]


class Key(str, Enum):
    DOWN = "ArrowDown"
    UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


def matches_query(option: TemplateOption, query: str) -> bool:
    needle = query.lower()
    if needle in option.node_name.lower():
        return True
    if option.field and needle in option.field.lower():
        return True
    return bool(option.description) and needle in option.description.lower()


def filter_options(options: Sequence[TemplateOption], query: str) -> List[TemplateOption]:
    """Substring filter that keeps the original candidate order."""

    if not query:
        return list(options)
    return [option for option in options if matches_query(option, query)]


@dataclass
class AutocompleteState:
    candidates: List[TemplateOption] = field(default_factory=list)
    filter_text: str = ""
    selected_index: int = 0
    is_open: bool = False
    _filtered: List[TemplateOption] = field(default_factory=list, repr=False)
    _listeners: List[Listener] = field(default_factory=list, repr=False)

    @property
    def filtered(self) -> List[TemplateOption]:
        return list(self._filtered)

    @property
    def selected(self) -> Optional[TemplateOption]:
        if not self.is_open or not self._filtered:
            return None
        return self._filtered[self.selected_index]

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def open(self, candidates: Sequence[TemplateOption], filter_text: str = "") -> None:
        self.candidates = list(candidates)
        self.is_open = True
        self._apply_filter(filter_text)
        self._notify()

    def open_for_node(
        self,
        target_id: str,
        snapshot: GraphSnapshot,
        *,
        registry: Optional[ActionRegistry] = None,
        filter_text: str = "",
    ) -> None:
        self.open(
            build_template_options(target_id, snapshot.nodes, snapshot.edges, registry=registry),
            filter_text,
        )

    def close(self) -> None:
        """Close and drop every listener; later key presses are ignored."""

        self.is_open = False
        self.candidates = []
        self.filter_text = ""
        self.selected_index = 0
        self._filtered = []
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self)

    def set_filter(self, filter_text: str) -> None:
        if not self.is_open:
            return
        if filter_text == self.filter_text:
            return
        self._apply_filter(filter_text)
        self._notify()

    def move_down(self) -> None:
        if self.is_open and self.selected_index < len(self._filtered) - 1:
            self.selected_index += 1
            self._notify()

    def move_up(self) -> None:
        if self.is_open and self.selected_index > 0:
            self.selected_index -= 1
            self._notify()

    def hover(self, index: int) -> None:
        if not self.is_open or not 0 <= index < len(self._filtered):
            return
        if index != self.selected_index:
            self.selected_index = index
            self._notify()

    def commit(self) -> Optional[TemplateOption]:
        """Return the selected option and close; no-op on an empty list."""

        option = self.selected
        if option is not None:
            self.close()
        return option

    def handle_key(self, key: Key | str) -> Optional[TemplateOption]:
        if not self.is_open:
            return None
        try:
            key = Key(key)
        except ValueError:
            return None

        if key is Key.DOWN:
            self.move_down()
        elif key is Key.UP:
            self.move_up()
        elif key is Key.ENTER:
            return self.commit()
        elif key is Key.ESCAPE:
            self.close()
        return None

    def _apply_filter(self, filter_text: str) -> None:
        self.filter_text = filter_text
        self._filtered = filter_options(self.candidates, filter_text)
        self.selected_index = 0

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
