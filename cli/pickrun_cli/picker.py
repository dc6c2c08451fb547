from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Sequence

from prompt_toolkit import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.output import Output, create_output
from prompt_toolkit.styles import Style
from prompt_toolkit.utils import get_cwidth
from prompt_toolkit.widgets import Frame

from .actions import Action
from .config import UiConfig
from .engine import Direction, Engine
from .errors import EventReadError, TerminalSetupError, TerminalTeardownError

log = logging.getLogger(__name__)

HIGHLIGHT_SYMBOL = "> "

_STYLE = Style.from_dict(
    {
        "": "bg:default fg:default",
        "frame.border": "fg:gray",
        "frame.label": "fg:gray",
        "search": "fg:default",
        "item": "",
        "cursor": "fg:ansibrightblue bold",
        "empty": "fg:gray italic",
        "footer": "ansiwhite bold",
        "footer_dim": "fg:gray",
    }
)


@dataclass
class TerminalSession:
    input: Input
    output: Output
    teardown_error: TerminalTeardownError | None = None


@contextmanager
def terminal_session(input: Input | None = None, output: Output | None = None) -> Iterator[TerminalSession]:
    """Own the terminal for one picker session.

    Streams passed in by the caller are used as-is and left open. Restore
    failures are recorded on the session instead of raised, so a selection
    made before teardown is not lost.
    """
    owns_input = input is None
    if input is None:
        if not sys.stdin.isatty():
            raise TerminalSetupError("stdin is not a terminal.")
        try:
            input = create_input()
        except Exception as exc:
            raise TerminalSetupError(f"Failed to open terminal input: {exc}") from exc
    if output is None:
        try:
            output = create_output(always_prefer_tty=True)
        except Exception as exc:
            if owns_input:
                input.close()
            raise TerminalSetupError(f"Failed to open terminal output: {exc}") from exc

    session = TerminalSession(input=input, output=output)
    try:
        yield session
    finally:
        try:
            output.show_cursor()
            output.flush()
            if owns_input:
                input.close()
        except Exception as exc:
            session.teardown_error = TerminalTeardownError(f"Failed to restore terminal: {exc}")
            log.debug("terminal teardown failed", exc_info=True)


def build_application(
        engine: Engine,
        ui: UiConfig | None = None,
        *,
        input: Input | None = None,
        output: Output | None = None,
) -> Application[Action | None]:
    ui = ui or UiConfig()

    def get_search() -> FormattedText:
        return FormattedText([("class:search", engine.query)])

    def get_search_cursor() -> Point:
        return Point(x=get_cwidth(engine.query), y=0)

    def get_list() -> FormattedText:
        if not engine.filtered:
            return FormattedText([("class:empty", "  No matches")])
        lines: list[tuple[str, str]] = []
        for idx, action in enumerate(engine.filtered):
            if idx == engine.cursor:
                lines.append(("class:cursor", f"{HIGHLIGHT_SYMBOL}{action.name}"))
            else:
                lines.append(("class:item", f"  {action.name}"))
            lines.append(("", "\n"))
        lines.pop()
        return FormattedText(lines)

    def get_footer() -> FormattedText:
        return FormattedText(
            [
                ("class:footer", "Enter "),
                ("class:footer_dim", "run  "),
                ("class:footer", "↑/↓ Ctrl+K/J "),
                ("class:footer_dim", "move  "),
                ("class:footer", "Esc "),
                ("class:footer_dim", "cancel"),
            ]
        )

    kb = KeyBindings()

    @kb.add(Keys.ControlC, eager=True)
    @kb.add(Keys.Escape, eager=True)
    def _cancel(event) -> None:
        engine.cancel()
        event.app.exit(result=None)

    @kb.add(Keys.Up, eager=True)
    @kb.add(Keys.ControlK, eager=True)
    def _up(_event) -> None:
        engine.move_selection(Direction.UP)

    @kb.add(Keys.Down, eager=True)
    @kb.add(Keys.ControlJ, eager=True)
    def _down(_event) -> None:
        engine.move_selection(Direction.DOWN)

    @kb.add(Keys.Backspace, eager=True)
    def _backspace(_event) -> None:
        engine.delete_last_char()

    @kb.add(Keys.Enter, eager=True)
    def _enter(event) -> None:
        action = engine.confirm_selection()
        if action is None:
            return
        event.app.exit(result=action)

    @kb.add(Keys.Any)
    def _text(event) -> None:
        char = event.key_sequence[0].key
        if isinstance(char, str) and len(char) == 1 and char.isprintable():
            engine.insert_char(char)

    @kb.add(Keys.BracketedPaste)
    def _paste(event) -> None:
        text = getattr(event, "data", "") or ""
        for char in text:
            if char.isprintable():
                engine.insert_char(char)

    search = FormattedTextControl(
        text=get_search,
        focusable=True,
        show_cursor=True,
        get_cursor_position=get_search_cursor,
    )
    items = FormattedTextControl(text=get_list, focusable=False, show_cursor=False)
    footer = FormattedTextControl(text=get_footer, focusable=False, show_cursor=False)

    search_window = Window(search, height=1)
    list_rows = max(1, len(engine.registry))
    root_container = HSplit(
        [
            Frame(search_window, title=ui.search_title),
            Frame(
                Window(items, always_hide_cursor=True, height=Dimension(min=1, preferred=list_rows)),
                title=ui.list_title,
            ),
            Window(footer, height=1, always_hide_cursor=True),
        ]
    )
    layout = Layout(root_container, focused_element=search_window)
    return Application(
        layout=layout,
        key_bindings=kb,
        style=_STYLE,
        full_screen=ui.full_screen,
        input=input,
        output=output,
    )


def run_picker(
        actions: Sequence[Action],
        *,
        ui: UiConfig | None = None,
        initial_query: str = "",
        input: Input | None = None,
        output: Output | None = None,
) -> Action | None:
    """Run one interactive session and return the confirmed action.

    Returns ``None`` when the user cancels. The terminal is restored before
    this function returns, on every path. A failed restore raises
    :class:`TerminalTeardownError` with the confirmed action attached.
    """
    engine = Engine(actions)
    for char in initial_query:
        if char.isprintable():
            engine.insert_char(char)

    with terminal_session(input=input, output=output) as session:
        app = build_application(engine, ui, input=session.input, output=session.output)
        # raw mode and the alternate screen are entered inside run(), before the first frame
        rendered = False

        def _mark_rendered(_app) -> None:
            nonlocal rendered
            rendered = True

        app.after_render += _mark_rendered
        log.debug("picker started with %d actions", len(engine.registry))
        try:
            result = app.run()
        except OSError as exc:
            if not rendered:
                raise TerminalSetupError(f"Failed to prepare terminal: {exc}") from exc
            raise EventReadError(f"Reading keyboard input failed: {exc}") from exc
        except EOFError as exc:
            raise EventReadError(f"Reading keyboard input failed: {exc or type(exc).__name__}") from exc

    if session.teardown_error is not None:
        session.teardown_error.selection = result
        raise session.teardown_error
    log.debug("picker finished: %s", result.name if result else "cancelled")
    return result
