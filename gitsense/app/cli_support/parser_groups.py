"""Subcommand parser builders."""

from __future__ import annotations

import argparse

from gitsense.core.config import CONFIG_SCHEMA
from gitsense.core.enums import AnalyzedFilter, TreeFormat


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {raw}")
    return value


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw}")
    return value


class _FieldsTypoAction(argparse.Action):
    """Reject the singular --field with a pointer to --fields."""

    def __call__(self, parser, namespace, values, option_string=None):
        parser.error(f"unknown flag: {option_string}. Did you mean --fields?")


def _add_grep_parser(sub) -> None:
    p_grep = sub.add_parser(
        "grep",
        help="Search code with metadata enrichment (JSON output)",
        epilog="""\
modes:
  --summary    aggregated metadata only (cheap, fast)
  (default)    every match with context and metadata

examples:
  gsc grep "authenticate" --db security --summary
  gsc grep "TODO" --filter "risk_level=high" --file "internal/*"
  gsc grep "parse" --filter "loc=100..500;layer in cli,core" --analyzed true""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_grep.add_argument("pattern", help="Search pattern (ripgrep regex)")
    p_grep.add_argument("--db", "-d", default=None, help="Database name for enrichment")
    p_grep.add_argument(
        "--summary", action="store_true", help="Return only the summary (no matches)"
    )
    p_grep.add_argument(
        "--context",
        "-C",
        type=_non_negative_int,
        default=None,
        help="Show N lines of context around matches (default: config grep_context)",
    )
    p_grep.add_argument(
        "--case-sensitive",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Case-sensitive search (default: true)",
    )
    p_grep.add_argument("--type", "-t", default=None, help="File type filter (e.g. py, go)")
    p_grep.add_argument(
        "--limit",
        type=_non_negative_int,
        default=None,
        help="Max files in the summary, 0 for no limit (default: config grep_limit)",
    )
    p_grep.add_argument(
        "--filter",
        action="append",
        default=None,
        metavar="EXPR",
        help="Metadata filter, e.g. 'topic=security' (repeatable, ANDed)",
    )
    p_grep.add_argument(
        "--analyzed",
        choices=[str(value) for value in AnalyzedFilter],
        default=str(AnalyzedFilter.ALL),
        help="Filter by analysis status (default: all)",
    )
    p_grep.add_argument(
        "--file",
        action="append",
        default=None,
        metavar="GLOB",
        help="File path pattern, '*' wildcards (repeatable, ORed)",
    )
    p_grep.add_argument(
        "--no-stats", action="store_true", help="Do not record search statistics"
    )


def _add_tree_parser(sub) -> None:
    p_tree = sub.add_parser(
        "tree",
        help="Tracked-file tree annotated with metadata",
        epilog="""\
filtering & pruning:
  --filter "field=val"   filter by metadata ('in' for several values: layer in cli,core)
  --prune                hide non-matching files for a condensed map
  --focus "path/**"      restrict the tree to paths or globs
  --no-compact           show names of non-matching files in the heat map

examples:
  gsc tree --db arch --fields purpose
  gsc tree --db arch --filter "risk_level=high" --prune --format ai-portable""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_tree.add_argument("--db", "-d", default=None, help="Database name for metadata enrichment")
    p_tree.add_argument(
        "--fields",
        action="append",
        default=None,
        metavar="NAMES",
        help="Metadata fields to display (comma-separated, repeatable)",
    )
    p_tree.add_argument("--field", action=_FieldsTypoAction, help=argparse.SUPPRESS)
    p_tree.add_argument(
        "--indent", type=_positive_int, default=None, help="Indentation width (default: 4)"
    )
    p_tree.add_argument(
        "--truncate",
        type=_non_negative_int,
        default=None,
        help="Max characters per metadata value, 0 for none (default: 60)",
    )
    p_tree.add_argument(
        "--format",
        type=str.lower,
        choices=[str(value) for value in TreeFormat],
        default=str(TreeFormat.HUMAN),
        help="Output format (default: human)",
    )
    p_tree.add_argument(
        "--prune", action="store_true", help="Hide files and dirs that don't match the filters"
    )
    p_tree.add_argument(
        "--filter",
        "-F",
        action="append",
        default=None,
        metavar="EXPR",
        help="Metadata filter (repeatable, ANDed)",
    )
    p_tree.add_argument(
        "--focus",
        "-f",
        action="append",
        default=None,
        metavar="GLOB",
        help="Restrict the tree to paths matching a glob (repeatable)",
    )
    p_tree.add_argument(
        "--no-compact",
        action="store_true",
        help="Show filenames for non-matching files in the heat map",
    )


def _add_fields_parser(sub) -> None:
    p_fields = sub.add_parser("fields", help="List filterable fields or databases")
    p_fields.add_argument("--db", "-d", default=None, help="Database to describe")
    p_fields.add_argument(
        "--list-databases", action="store_true", help="List databases in .gitsense/"
    )
    p_fields.add_argument("--json", action="store_true", help="Emit JSON")


def _add_values_parser(sub) -> None:
    p_values = sub.add_parser("values", help="List the distinct values of a field with counts")
    p_values.add_argument("database", help="Database to read")
    p_values.add_argument("field", help="Field whose values to list")
    p_values.add_argument(
        "--format",
        "-o",
        type=str.lower,
        choices=["json", "table"],
        default="table",
        help="Output format (default: table)",
    )
    p_values.add_argument(
        "--quiet", "-q", action="store_true", help="Omit the header and hints"
    )

def _add_config_parser(sub) -> None:
    p_config = sub.add_parser("config", help="Show/set/unset project configuration")
    config_sub = p_config.add_subparsers(dest="config_action")
    config_sub.add_parser("show", help="Show all config values")
    keys = ", ".join(CONFIG_SCHEMA)
    c_set = config_sub.add_parser("set", help="Set a config value")
    c_set.add_argument("config_key", type=str, help=f"Config key name ({keys})")
    c_set.add_argument("config_value", type=str, help="Value to set")
    c_unset = config_sub.add_parser("unset", help="Reset a config key to default")
    c_unset.add_argument("config_key", type=str, help="Config key name")


__all__ = [
    "_add_config_parser",
    "_add_fields_parser",
    "_add_grep_parser",
    "_add_tree_parser",
    "_add_values_parser",
]
