"""values command: the distinct values of one field and how many files hold each."""

from __future__ import annotations

import argparse
import json
import sys

from gitsense.app.commands.helpers.runtime import command_runtime
from gitsense.app.commands.helpers.store import store_session
from gitsense.core.errors import UnknownFieldError
from gitsense.core.output import colorize, error
from gitsense.engine.metadata.store import list_field_values

EMPTY_MESSAGE = "No items found."


def _print_table(db_name: str, field: str, values: list[tuple[str, int]], quiet: bool) -> None:
    if not values:
        print(EMPTY_MESSAGE)
        return
    width = max(len("Value"), *(len(value) for value, _ in values))
    if not quiet:
        print(colorize(f"{'Value':<{width}}  Count", "bold"))
    for value, count in values:
        print(f"{value:<{width}}  {count}")
    if not quiet:
        print()
        print(
            colorize(
                f'Filter on one with: gsc grep <pattern> --db {db_name} --filter "{field}=<value>"',
                "dim",
            )
        )


def cmd_values(args: argparse.Namespace) -> None:
    """List the values stored for a field, most common first."""
    runtime = command_runtime(args)
    db_name = args.database
    field = args.field
    with store_session(db_name, runtime.root) as session:
        try:
            values = list_field_values(session.conn, field)
        except UnknownFieldError as exc:
            listing = ", ".join(exc.available) or "(none)"
            error(
                f"field '{field}' not found in database '{db_name}'. "
                f"Available fields: {listing}"
            )
            sys.exit(1)

    if args.format == "json":
        payload = {
            "database": db_name,
            "field": field,
            "values": [{"value": value, "count": count} for value, count in values],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    _print_table(db_name, field, values, bool(getattr(args, "quiet", False)))


__all__ = ["EMPTY_MESSAGE", "cmd_values"]
