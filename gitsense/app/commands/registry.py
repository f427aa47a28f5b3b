"""Central command registry for CLI command handler resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

CommandHandler = Callable[[Any], None]

_COMMAND_HANDLERS: dict[str, CommandHandler] | None = None


def _build_handlers() -> dict[str, CommandHandler]:
    """Import all command modules and build the handler dict on first access."""
    from gitsense.app.commands.config_cmd import cmd_config
    from gitsense.app.commands.fields_cmd import cmd_fields
    from gitsense.app.commands.grep_cmd import cmd_grep
    from gitsense.app.commands.tree_cmd import cmd_tree
    from gitsense.app.commands.values_cmd import cmd_values

    return {
        "grep": cmd_grep,
        "tree": cmd_tree,
        "fields": cmd_fields,
        "values": cmd_values,
        "config": cmd_config,
    }


def get_command_handlers() -> dict[str, CommandHandler]:
    """Return cached command handler dict, building on first access."""
    global _COMMAND_HANDLERS
    if _COMMAND_HANDLERS is None:
        _COMMAND_HANDLERS = _build_handlers()
    return _COMMAND_HANDLERS


__all__ = ["CommandHandler", "get_command_handlers"]
