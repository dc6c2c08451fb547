from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, save_config
from ..errors import ConfigError

app = typer.Typer(help="Manage local settings (~/.config/pickrun/config.toml).")


@app.command("path")
def show_path():
    console.console.print(config_path(), soft_wrap=True)


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return
    saved = save_config(default_config())
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)
    console.console.print(
        f"full_screen={cfg.ui.full_screen} search_title={cfg.ui.search_title!r} "
        f"list_title={cfg.ui.list_title!r} wait={cfg.launcher.wait}",
        soft_wrap=True,
    )
