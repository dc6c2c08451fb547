from __future__ import annotations

import logging

import typer
from rich.table import Table

from . import __version__, actions, console
from .commands import settings_cmd
from .config import load_config
from .errors import (
    ConfigError,
    EventReadError,
    LaunchError,
    LoadError,
    TerminalSetupError,
    TerminalTeardownError,
)
from .launcher import launch
from .logging_ import setup_logging
from .picker import run_picker

log = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"pickrun {__version__}")
        raise typer.Exit()


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="pickrun",
        help="Fuzzy-pick an action and run it.",
        no_args_is_help=False,
    )
    app.add_typer(settings_cmd.app, name="settings")

    @app.command("list", help="Show the available actions.")
    def list_actions() -> None:
        try:
            registry = actions.load()
        except LoadError as exc:
            console.err(str(exc))
            raise typer.Exit(code=1)
        table = Table(title="Actions")
        table.add_column("name", style="bold")
        table.add_column("command")
        for action in registry:
            table.add_row(action.name, action.command_line)
        console.print(table)

    @app.callback(invoke_without_command=True)
    def _main(
            ctx: typer.Context,
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
            query: str = typer.Option("", "-q", "--query", help="Start with this search text."),
            no_wait: bool = typer.Option(False, "--no-wait", help="Do not wait for the launched command."),
            version: bool = typer.Option(
                False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
            ),
    ):
        setup_logging(verbose)
        if ctx.invoked_subcommand is not None:
            return
        _pick_and_launch(query=query, no_wait=no_wait)

    return app


def _pick_and_launch(*, query: str, no_wait: bool) -> None:
    try:
        cfg = load_config()
        registry = actions.load()
    except (ConfigError, LoadError) as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)

    teardown_failed = False
    try:
        selected = run_picker(registry, ui=cfg.ui, initial_query=query)
    except (TerminalSetupError, EventReadError) as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)
    except TerminalTeardownError as exc:
        console.warn(str(exc))
        selected = exc.selection
        teardown_failed = True

    if selected is None:
        log.debug("cancelled")
    else:
        wait = cfg.launcher.wait and not no_wait
        try:
            launch(selected.command, wait=wait)
        except LaunchError as exc:
            console.err(str(exc))
            raise typer.Exit(code=1)

    if teardown_failed:
        raise typer.Exit(code=1)


app = _build_app()
