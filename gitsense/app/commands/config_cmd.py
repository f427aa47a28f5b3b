"""config command: show/set/unset project configuration."""

from __future__ import annotations

import argparse
import json
import sys

from gitsense.app.commands.helpers.runtime import command_runtime
from gitsense.core import config as config_mod
from gitsense.core.output import colorize, error


def _show(config: dict) -> None:
    print(colorize("Configuration (.gitsense/config.json):", "bold"))
    for key, schema in config_mod.CONFIG_SCHEMA.items():
        value = config.get(key, schema.default)
        marker = "" if value == schema.default else colorize(" (set)", "green")
        print(f"  {key} = {json.dumps(value)}{marker}")
        print(colorize(f"      {schema.description}", "dim"))


def _save_or_exit(config: dict, root) -> None:
    try:
        config_mod.save_config(config, config_mod.config_path(root))
    except OSError as exc:
        error(f"could not save config: {exc}")
        sys.exit(1)


def cmd_config(args: argparse.Namespace) -> None:
    runtime = command_runtime(args)
    config = dict(runtime.config)
    action = getattr(args, "config_action", None) or "show"

    if action == "show":
        _show(config)
        return

    key = args.config_key
    try:
        if action == "set":
            config_mod.set_config_value(config, key, args.config_value)
        else:
            config_mod.unset_config_value(config, key)
    except KeyError:
        known = ", ".join(config_mod.CONFIG_SCHEMA)
        error(f"unknown config key '{key}'. Known keys: {known}")
        sys.exit(1)
    except ValueError as exc:
        error(str(exc))
        sys.exit(1)

    _save_or_exit(config, runtime.root)
    verb = "Set" if action == "set" else "Reset"
    print(colorize(f"{verb} {key} = {json.dumps(config[key])}", "green"))


__all__ = ["cmd_config"]
