from __future__ import annotations


class PickrunError(Exception):
    """Base error for pickrun."""


class LoadError(PickrunError):
    """Action definitions are missing or malformed."""


class ConfigError(PickrunError):
    """Settings file exists but cannot be used."""


class TerminalSetupError(PickrunError):
    """Terminal could not be prepared for the interactive session."""


class TerminalTeardownError(PickrunError):
    """Terminal could not be restored after the session.

    ``selection`` carries the action confirmed before the restore failed, if any.
    """

    def __init__(self, message: str, *, selection=None) -> None:
        super().__init__(message)
        self.selection = selection


class EventReadError(PickrunError):
    """Input source failed while the session was running."""


class LaunchError(PickrunError):
    """Selected command failed to start or exited with a non-zero status."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
