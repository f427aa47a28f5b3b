"""Immutable per-invocation options assembled from CLI args and config.

Commands build one options object up front and pass it down; nothing below
the command layer reads argparse namespaces or config dicts.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from gitsense.core.enums import AnalyzedFilter, TreeFormat, canonical_analyzed_filter
from gitsense.engine.search.models import SearchOptions


@dataclass(frozen=True)
class FilterOptions:
    filters: tuple[str, ...] = ()
    analyzed: AnalyzedFilter = AnalyzedFilter.ALL
    file_globs: tuple[str, ...] = ()


@dataclass(frozen=True)
class GrepOptions:
    search: SearchOptions
    database: str = ""
    filter: FilterOptions = FilterOptions()
    summary_only: bool = False
    limit: int = 50
    record_stats: bool = True


@dataclass(frozen=True)
class TreeOptions:
    database: str = ""
    fields: tuple[str, ...] = ()
    indent: int = 4
    truncate: int = 60
    format: TreeFormat = TreeFormat.HUMAN
    prune: bool = False
    focus: tuple[str, ...] = ()
    no_compact: bool = False
    filter: FilterOptions = FilterOptions()


def split_csv(values: Iterable[str] | None) -> tuple[str, ...]:
    """Flatten repeatable comma-separated flag values, dropping blanks and repeats."""
    items: dict[str, None] = {}
    for value in values or ():
        for part in value.split(","):
            part = part.strip()
            if part:
                items.setdefault(part, None)
    return tuple(items)


def _pick(value, fallback):
    return fallback if value is None else value


def grep_options_from_args(args, config: dict) -> GrepOptions:
    search = SearchOptions(
        pattern=args.pattern,
        context_lines=_pick(getattr(args, "context", None), config["grep_context"]),
        case_sensitive=getattr(args, "case_sensitive", True),
        file_type=getattr(args, "type", None) or "",
    )
    return GrepOptions(
        search=search,
        database=getattr(args, "db", None) or config["default_database"],
        filter=FilterOptions(
            filters=tuple(getattr(args, "filter", None) or ()),
            analyzed=canonical_analyzed_filter(getattr(args, "analyzed", "all")),
            file_globs=tuple(getattr(args, "file", None) or ()),
        ),
        summary_only=bool(getattr(args, "summary", False)),
        limit=_pick(getattr(args, "limit", None), config["grep_limit"]),
        record_stats=not getattr(args, "no_stats", False),
    )


def tree_options_from_args(args, config: dict) -> TreeOptions:
    fields = split_csv(getattr(args, "fields", None)) or tuple(config["tree_fields"])
    return TreeOptions(
        database=getattr(args, "db", None) or config["default_database"],
        fields=fields,
        indent=_pick(getattr(args, "indent", None), config["tree_indent"]),
        truncate=_pick(getattr(args, "truncate", None), config["tree_truncate"]),
        format=TreeFormat(getattr(args, "format", None) or TreeFormat.HUMAN),
        prune=bool(getattr(args, "prune", False)),
        focus=tuple(getattr(args, "focus", None) or ()),
        no_compact=bool(getattr(args, "no_compact", False)),
        filter=FilterOptions(filters=tuple(getattr(args, "filter", None) or ())),
    )


__all__ = [
    "FilterOptions",
    "GrepOptions",
    "TreeOptions",
    "grep_options_from_args",
    "split_csv",
    "tree_options_from_args",
]
