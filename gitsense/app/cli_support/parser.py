"""CLI parser construction helpers."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version as get_version

from gitsense.app.cli_support.parser_groups import (
    _add_config_parser,
    _add_fields_parser,
    _add_grep_parser,
    _add_tree_parser,
    _add_values_parser,
)

USAGE_EXAMPLES = """
commands:
  grep       Search code; results enriched with file metadata (JSON)
  tree       Tracked-file tree as a metadata heat map
  fields     List filterable fields of a database
  values     Distinct values of a field with file counts
  config     Project configuration

filter syntax:
  field=value  field!=value  field~text  field!~text
  field>N  field<N  field>=N  field<=N  field=MIN..MAX
  field in a,b  field not in a,b  field exists  field !exists
  join several with ';' or repeat --filter (all are ANDed)

examples:
  gsc grep "password" --db security --summary
  gsc tree --db arch --filter "layer in cli,core" --prune
  gsc fields --db arch
  gsc values arch risk_level
"""


class _NoAbbrevArgumentParser(argparse.ArgumentParser):
    """Argparse parser variant that disables long-option abbreviation."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_abbrev", False)
        super().__init__(*args, **kwargs)


def _cli_version_string() -> str:
    """Return the best available CLI version label."""
    try:
        return f"gsc {get_version('gitsense')}"
    except PackageNotFoundError:
        return "gsc (version unknown)"


def create_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser with all subcommands."""
    parser = _NoAbbrevArgumentParser(
        prog="gsc",
        description="gsc: metadata-aware code search and repository maps",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug detail to stderr (also enabled by GITSENSE_DEBUG=1)",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=_cli_version_string(),
    )
    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_NoAbbrevArgumentParser,
    )
    _add_grep_parser(sub)
    _add_tree_parser(sub)
    _add_fields_parser(sub)
    _add_values_parser(sub)
    _add_config_parser(sub)
    return parser


__all__ = ["USAGE_EXAMPLES", "create_parser"]
