"""Project-wide config (.gitsense/config.json)."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gitsense.core.paths import data_dir, safe_write_text

CONFIG_FILENAME = "config.json"
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


CONFIG_SCHEMA: dict[str, ConfigKey] = {
    "default_database": ConfigKey(
        str, "", "Manifest database used when --db is omitted"
    ),
    "grep_context": ConfigKey(
        int, 0, "Context lines shown around grep matches"
    ),
    "grep_limit": ConfigKey(
        int, 50, "Max files listed in the grep summary (0 = unlimited)"
    ),
    "tree_indent": ConfigKey(int, 4, "Indentation width of the tree view"),
    "tree_truncate": ConfigKey(
        int, 60, "Max characters shown per metadata value (0 = no truncation)"
    ),
    "tree_fields": ConfigKey(
        list, [], "Metadata fields shown under matched files when --fields is omitted"
    ),
}


def config_path(root: Path | None = None) -> Path:
    return data_dir(root) / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """Return a config dict with all keys set to their defaults."""
    return {k: copy.deepcopy(v.default) for k, v in CONFIG_SCHEMA.items()}


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from disk, filling missing keys with defaults.

    A missing or unreadable file yields the defaults; nothing is written back.
    """
    p = path or config_path()
    config: dict[str, Any] = {}
    if p.exists():
        try:
            loaded = json.loads(p.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.debug("Ignoring unreadable config %s: %s", p, exc)
            loaded = {}
        if isinstance(loaded, dict):
            config = loaded

    for key, schema in CONFIG_SCHEMA.items():
        if key not in config or not isinstance(config[key], schema.type):
            config[key] = copy.deepcopy(schema.default)
    return config


def save_config(config: dict, path: Path | None = None) -> None:
    """Save config to disk atomically."""
    p = path or config_path()
    safe_write_text(p, json.dumps(config, indent=2) + "\n")


def _set_int_config_value(config: dict, key: str, raw: str) -> None:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Expected integer for {key}, got: {raw}") from None
    if value < 0:
        raise ValueError(f"Expected non-negative integer for {key}, got: {raw}")
    config[key] = value


def _set_list_config_value(config: dict, key: str, raw: str) -> None:
    items = [part.strip() for part in raw.split(",") if part.strip()]
    current = config.setdefault(key, [])
    for item in items:
        if item not in current:
            current.append(item)


def set_config_value(config: dict, key: str, raw: str) -> None:
    """Parse and set a config value from a raw string.

    List keys accept comma-separated values and append without duplicates.
    """
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")

    schema = CONFIG_SCHEMA[key]
    if schema.type is int:
        _set_int_config_value(config, key, raw)
        return
    if schema.type is list:
        _set_list_config_value(config, key, raw)
        return
    config[key] = raw


def unset_config_value(config: dict, key: str) -> None:
    """Reset a config key to its default value."""
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")
    config[key] = copy.deepcopy(CONFIG_SCHEMA[key].default)


__all__ = [
    "CONFIG_SCHEMA",
    "ConfigKey",
    "config_path",
    "default_config",
    "load_config",
    "save_config",
    "set_config_value",
    "unset_config_value",
]
