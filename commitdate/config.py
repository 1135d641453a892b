"""Configuration loading: TOML file + environment variable overlay."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]


DEFAULT_CONFIG_DIR = Path.home() / ".config" / "commit-date"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"


DEFAULT_CONFIG_TOML = """\
[general]
# Commits shown in interactive mode
count = 10
# Commits searched when resolving a hash in non-interactive mode
lookup_limit = 100
allow_pushed = false

[display]
color = true
short_id_length = 7
"""


@dataclass
class GeneralConfig:
    count: int = 10
    lookup_limit: int = 100
    allow_pushed: bool = False


@dataclass
class DisplayConfig:
    color: bool = True
    short_id_length: int = 7


@dataclass
class AppConfig:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    config_path: Path = DEFAULT_CONFIG_PATH


def _positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    return _positive_int(name, value)


def _env_overlay(config: AppConfig) -> None:
    """Override config values with environment variables where applicable."""
    config.general.count = _env_int("COMMIT_DATE_COUNT", config.general.count)
    config.general.lookup_limit = _env_int(
        "COMMIT_DATE_LOOKUP_LIMIT", config.general.lookup_limit
    )
    # https://no-color.org
    if "NO_COLOR" in os.environ:
        config.display.color = False


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file with env var overlay."""
    path = config_path or DEFAULT_CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    else:
        raw = tomllib.loads(DEFAULT_CONFIG_TOML)

    general = raw.get("general", {})
    display = raw.get("display", {})

    config = AppConfig(
        general=GeneralConfig(
            count=_positive_int("general.count", general.get("count", 10)),
            lookup_limit=_positive_int(
                "general.lookup_limit", general.get("lookup_limit", 100)
            ),
            allow_pushed=general.get("allow_pushed", False),
        ),
        display=DisplayConfig(
            color=display.get("color", True),
            short_id_length=_positive_int(
                "display.short_id_length", display.get("short_id_length", 7)
            ),
        ),
        config_path=path,
    )

    _env_overlay(config)
    return config


def init_config(config_path: Path | None = None) -> Path:
    """Create default config file."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TOML)
    return path
