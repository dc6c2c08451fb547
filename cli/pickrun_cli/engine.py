from __future__ import annotations

from enum import Enum
from typing import Sequence

from .actions import Action
from .fuzzy import Matcher, fuzzy_match


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    STAY = "stay"


class Engine:
    """Query text, the actions it matches and the highlighted entry.

    ``filtered`` always keeps registry order; match scores only decide
    inclusion. ``cursor`` is 0 while nothing matches and stays inside
    ``filtered`` otherwise.
    """

    def __init__(self, registry: Sequence[Action], matcher: Matcher = fuzzy_match) -> None:
        self.registry: tuple[Action, ...] = tuple(registry)
        self.matcher = matcher
        self.query = ""
        self.filtered: list[Action] = []
        self.cursor: int | None = None
        self._recompute()

    def insert_char(self, char: str) -> None:
        self.query += char
        self._recompute()

    def delete_last_char(self) -> None:
        if not self.query:
            return
        self.query = self.query[:-1]
        self._recompute()

    def move_selection(self, direction: Direction) -> None:
        count = len(self.filtered)
        if count == 0:
            self.cursor = 0
            return
        current = self.cursor
        if current is None:
            self.cursor = 0
        elif direction is Direction.DOWN:
            self.cursor = (current + 1) % count
        elif direction is Direction.UP:
            self.cursor = count - 1 if current == 0 else current - 1
        else:
            # Direction.STAY: clamp after the list changed underneath us
            self.cursor = min(max(current, 0), count - 1)

    def confirm_selection(self) -> Action | None:
        return self.selected

    def cancel(self) -> None:
        return None

    @property
    def selected(self) -> Action | None:
        if not self.filtered or self.cursor is None:
            return None
        if not 0 <= self.cursor < len(self.filtered):
            return None
        return self.filtered[self.cursor]

    def _recompute(self) -> None:
        query = self.query
        self.filtered = [a for a in self.registry if self.matcher(a.name, query) is not None]
        self.move_selection(Direction.STAY)
