"""Runtime settings for the commit gate."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .utils.code import DEFAULT_EXTENSIONS
from .utils.fileio import read_yaml_file

CONFIG_FILENAME = ".commitgate.yml"
SKIP_ENV = "LEFTHOOK_EXCLUDE"
SKIP_TOKEN = "security-check"


class ConfigError(ValueError):
    """Raised when the configuration file is malformed."""


@dataclass(frozen=True)
class Settings:
    """Knobs that shape a scan; rules themselves are not configurable."""

    verbose: bool = False
    workers: Optional[int] = None
    max_file_bytes: int = 1024 * 1024
    max_line_length: int = 2000
    include_tests: bool = False
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS

    @property
    def worker_count(self) -> int:
        return max(1, self.workers or os.cpu_count() or 1)


def _coerce(name: str, value: Any) -> Any:
    if name in {"verbose", "include_tests"}:
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be a boolean")
        return value
    if name == "workers":
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError("workers must be a positive integer")
        return value
    if name in {"max_file_bytes", "max_line_length"}:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{name} must be a positive integer")
        return value
    if name == "extensions":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
            raise ConfigError("extensions must be a list of strings")
        return tuple(item if item.startswith(".") else f".{item}" for item in value)
    raise ConfigError(f"unknown setting: {name}")


def settings_from_mapping(data: Mapping[str, Any], base: Optional[Settings] = None) -> Settings:
    """Apply ``data`` on top of ``base`` after validating every key."""

    known = {field.name for field in fields(Settings)}
    updates: Dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in known:
            raise ConfigError(f"unknown setting: {key}")
        updates[name] = _coerce(name, value)
    return replace(base or Settings(), **updates)


def load_settings(
    root: Path,
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """Build settings from defaults, the YAML file, then explicit overrides.

    ``config_path`` defaults to ``.commitgate.yml`` under ``root``; a missing
    default file is not an error, a missing explicit one is.
    """

    path = config_path or root / CONFIG_FILENAME
    if config_path is not None and not config_path.exists():
        raise ConfigError(f"config file not found: {config_path}")
    try:
        data = read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config at {path} is not a mapping")

    settings = settings_from_mapping(data)
    if overrides:
        settings = settings_from_mapping(
            {key: value for key, value in overrides.items() if value is not None}, settings
        )
    return settings


def should_skip(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Honour the hook runner's exclusion list."""

    env = os.environ if environ is None else environ
    excluded = env.get(SKIP_ENV, "")
    return SKIP_TOKEN in {item.strip() for item in excluded.replace(",", " ").split()}
