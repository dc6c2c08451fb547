from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from .errors import ConfigError

APP_NAME = "pickrun"
CONFIG_FILENAME = "config.toml"
ENV_CONFIG_PATH = "PICKRUN_CONFIG"


@dataclass
class UiConfig:
    full_screen: bool = True
    search_title: str = " Search "
    list_title: str = " Actions "


@dataclass
class LauncherConfig:
    wait: bool = True


@dataclass
class AppConfig:
    ui: UiConfig = field(default_factory=UiConfig)
    launcher: LauncherConfig = field(default_factory=LauncherConfig)


def config_path() -> str:
    override = os.getenv(ENV_CONFIG_PATH, "").strip()
    if override:
        return override
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "ui": {
            "full_screen": cfg.ui.full_screen,
            "search_title": cfg.ui.search_title,
            "list_title": cfg.ui.list_title,
        },
        "launcher": {
            "wait": cfg.launcher.wait,
        },
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()

    ui_raw = data.get("ui") or {}
    if not isinstance(ui_raw, dict):
        raise ConfigError("[ui] must be a table.")
    cfg.ui.full_screen = _get_bool(ui_raw, "full_screen", cfg.ui.full_screen, section="ui")
    cfg.ui.search_title = _get_str(ui_raw, "search_title", cfg.ui.search_title, section="ui")
    cfg.ui.list_title = _get_str(ui_raw, "list_title", cfg.ui.list_title, section="ui")

    launcher_raw = data.get("launcher") or {}
    if not isinstance(launcher_raw, dict):
        raise ConfigError("[launcher] must be a table.")
    cfg.launcher.wait = _get_bool(launcher_raw, "wait", cfg.launcher.wait, section="launcher")
    return cfg


def _get_bool(raw: dict[str, Any], key: str, default: bool, *, section: str) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be true or false, got {value!r}.")
    return value


def _get_str(raw: dict[str, Any], key: str, default: str, *, section: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{section}.{key} must be a string, got {value!r}.")
    return value


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return default_config()
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
    return from_toml(data)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    return path
