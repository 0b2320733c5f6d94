"""Dashboard configuration: defaults, JSON user config and environment."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping

from franken_tui.theme import THEMES

ALL_PANELS = (
    "overview",
    "queues",
    "jobs",
    "logs",
    "cache",
    "scheduler",
    "metrics",
    "shell",
    "settings",
)

LOG_LEVELS = ("emergency", "alert", "critical", "error", "warning", "notice", "info", "debug")

DEFAULT_POLLING_INTERVAL = 2.0
MIN_POLLING_INTERVAL = 0.5
DEFAULT_LOG_LIMIT = 100


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Keymap:
    quit: str = "q"
    refresh: str = "r"
    restart_worker: str = "R"
    clear_cache: str = "c"
    retry_job: str = "t"
    search: str = "/"
    navigate_down: str = "j"
    navigate_up: str = "k"

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, str]) -> "Keymap":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown keybindings: {', '.join(unknown)}")
        keymap = cls(**{name: str(value) for name, value in overrides.items()})
        keymap.validate()
        return keymap

    def validate(self) -> None:
        seen: dict[str, str] = {}
        for name, key in self.as_dict().items():
            if len(key) != 1 or not key.isprintable():
                raise ConfigError(f"keybinding {name} must be a single printable character: {key!r}")
            if key.isdigit():
                raise ConfigError(f"keybinding {name} conflicts with panel switch digit {key}")
            if key in seen:
                raise ConfigError(f"keybinding {name} duplicates {seen[key]} ({key!r})")
            seen[key] = name

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class DashboardConfig:
    app_dir: Path = field(default_factory=Path.cwd)
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    theme: str = "dark"
    panels: tuple[str, ...] = ALL_PANELS
    log_levels: tuple[str, ...] = LOG_LEVELS
    log_limit: int = DEFAULT_LOG_LIMIT
    keymap: Keymap = field(default_factory=Keymap)

    @property
    def log_path(self) -> Path:
        return self.app_dir / "storage" / "logs" / "laravel.log"


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"config path not found: {config_path}")

    try:
        payload = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON config: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("config root must be a JSON object")
    return payload


def _interval(value) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid polling interval: {value!r}") from exc
    return max(MIN_POLLING_INTERVAL, seconds)


def _theme(value) -> str:
    if value not in THEMES:
        raise ConfigError(f"unknown theme: {value}")
    return str(value)


def _panels(panel_config) -> tuple[str, ...] | None:
    if isinstance(panel_config, dict):
        # disable map: {"shell": false}
        active = tuple(p for p in ALL_PANELS if panel_config.get(p, True))
    elif isinstance(panel_config, list) and panel_config:
        # explicit order
        allowed = set(ALL_PANELS)
        active = tuple(dict.fromkeys(p for p in panel_config if p in allowed))
    else:
        return None
    if not active:
        raise ConfigError("at least one panel must be enabled")
    return active


def resolve_config(
    config_path: str | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> DashboardConfig:
    """Merge defaults, the JSON file, environment and CLI overrides in that order."""
    env = os.environ if env is None else env
    user_config = load_user_config(config_path)
    resolved: dict[str, object] = {}

    if "app_dir" in user_config:
        resolved["app_dir"] = Path(user_config["app_dir"]).expanduser()
    if "polling_interval" in user_config:
        resolved["polling_interval"] = _interval(user_config["polling_interval"])
    if "theme" in user_config:
        resolved["theme"] = _theme(user_config["theme"])
    panels = _panels(user_config.get("panels"))
    if panels:
        resolved["panels"] = panels
    if "log_levels" in user_config:
        levels = tuple(str(level).lower() for level in user_config["log_levels"])
        unknown = [level for level in levels if level not in LOG_LEVELS]
        if unknown:
            raise ConfigError(f"unknown log levels: {', '.join(unknown)}")
        resolved["log_levels"] = levels
    if "log_limit" in user_config:
        resolved["log_limit"] = max(1, int(user_config["log_limit"]))
    keybindings = user_config.get("keybindings")
    if keybindings is not None:
        if not isinstance(keybindings, dict):
            raise ConfigError("keybindings must be a JSON object")
        resolved["keymap"] = Keymap.from_mapping(keybindings)

    if env.get("FRANKEN_APP_DIR"):
        resolved["app_dir"] = Path(env["FRANKEN_APP_DIR"]).expanduser()
    if env.get("FRANKEN_POLLING_INTERVAL"):
        resolved["polling_interval"] = _interval(env["FRANKEN_POLLING_INTERVAL"])
    if env.get("FRANKEN_THEME"):
        resolved["theme"] = _theme(env["FRANKEN_THEME"])

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "app_dir":
            resolved[key] = Path(str(value)).expanduser()
        elif key == "polling_interval":
            resolved[key] = _interval(value)
        elif key == "theme":
            resolved[key] = _theme(value)
        else:
            raise ConfigError(f"unknown override: {key}")

    return DashboardConfig(**resolved)
