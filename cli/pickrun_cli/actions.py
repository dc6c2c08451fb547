from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .errors import LoadError


@dataclass(frozen=True)
class Action:
    name: str
    command: tuple[str, ...]

    @property
    def command_line(self) -> str:
        return " ".join(self.command)


_BUILTIN: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("shutdown", ("systemctl", "poweroff")),
    ("reboot", ("systemctl", "reboot")),
    ("logout", ("hyprctl", "dispatch", "exit")),
)


def load() -> list[Action]:
    """Return the built-in actions in display order."""
    return validate(Action(name=name, command=command) for name, command in _BUILTIN)


def validate(actions: Iterable[Action]) -> list[Action]:
    out: list[Action] = []
    for idx, action in enumerate(actions):
        if not action.name.strip():
            raise LoadError(f"Action #{idx} has an empty name.")
        if not action.command or not action.command[0]:
            raise LoadError(f"Action {action.name!r} has no command to run.")
        out.append(action)
    return out
