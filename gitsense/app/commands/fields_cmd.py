"""fields command: discover databases and the filterable fields they define."""

from __future__ import annotations

import argparse
import json

from gitsense.app.commands.helpers.runtime import command_runtime
from gitsense.app.commands.helpers.store import store_session
from gitsense.core.errors import StoreUnavailableError
from gitsense.core.output import colorize
from gitsense.engine.metadata.store import describe_fields, list_databases


def _print_databases(names: list[str], as_json: bool) -> None:
    if as_json:
        print(json.dumps({"databases": names}, indent=2))
        return
    if not names:
        print(colorize("No manifest databases found in .gitsense/.", "yellow"))
        return
    print(colorize(f"Databases ({len(names)}):", "bold"))
    for name in names:
        print(f"  {name}")


def _print_fields(db_name: str, fields: list[dict[str, str]], as_json: bool) -> None:
    if as_json:
        print(json.dumps({"database": db_name, "fields": fields}, indent=2, ensure_ascii=False))
        return
    print(colorize(f"Fields in {db_name} ({len(fields)}):", "bold"))
    width = max((len(item["name"]) for item in fields), default=0)
    for item in fields:
        line = f"  {item['name']:<{width}}  {colorize(item['type'], 'cyan')}"
        if item["description"]:
            line += f"  {colorize(item['description'], 'dim')}"
        print(line)


def cmd_fields(args: argparse.Namespace) -> None:
    """List the fields of a database, or the databases themselves."""
    runtime = command_runtime(args)
    as_json = bool(getattr(args, "json", False))

    if getattr(args, "list_databases", False):
        _print_databases(list_databases(runtime.root), as_json)
        return

    db_name = getattr(args, "db", None) or runtime.config["default_database"]
    if not db_name:
        raise StoreUnavailableError(
            "database is required. Use --db, or --list-databases to see what exists"
        )
    with store_session(db_name, runtime.root) as session:
        fields = describe_fields(session.conn)
    _print_fields(db_name, fields, as_json)


__all__ = ["cmd_fields"]
