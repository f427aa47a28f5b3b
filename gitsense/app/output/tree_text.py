"""ASCII heat-map rendering of the metadata tree."""

from __future__ import annotations

from collections.abc import Sequence

from gitsense.engine.filters.values import display_text
from gitsense.engine.tree.model import Node, TreeStats

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│"
MATCHED_GLYPH = "[✓] "
UNMATCHED_GLYPH = "[○] "
ELLIPSIS = "..."


def truncate_value(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[: max(limit - len(ELLIPSIS), 0)] + ELLIPSIS


def _child_prefix(prefix: str, is_last: bool, indent: int) -> str:
    if is_last:
        return prefix + " " * indent
    return prefix + PIPE + " " * (indent - 1)


def _metadata_lines(
    node: Node, prefix: str, fields: Sequence[str], truncate: int
) -> list[str]:
    lines: list[str] = []
    for name in fields:
        value = node.metadata.get(name)
        if value is None:
            continue
        label = f"{name}: " if len(fields) > 1 else ""
        lines.append(f"{prefix}  {label}{truncate_value(display_text(value), truncate)}")
    return lines


def _render_node(
    node: Node,
    *,
    prefix: str,
    is_last: bool,
    indent: int,
    truncate: int,
    fields: Sequence[str],
    no_compact: bool,
    lines: list[str],
) -> None:
    connector = LAST_BRANCH if is_last else BRANCH
    if node.is_dir:
        lines.append(f"{prefix}{connector}{node.name}")
    else:
        glyph = MATCHED_GLYPH if node.matched else UNMATCHED_GLYPH
        # Heat map: an unmatched file keeps its slot but not its name.
        name = node.name if node.matched or no_compact else ""
        lines.append(f"{prefix}{connector}{glyph}{name}")

    nested = _child_prefix(prefix, is_last, indent)
    if not node.is_dir:
        if node.matched and node.metadata and fields:
            lines.extend(_metadata_lines(node, nested, fields, truncate))
        return
    _render_children(
        node,
        prefix=nested,
        indent=indent,
        truncate=truncate,
        fields=fields,
        no_compact=no_compact,
        lines=lines,
    )


def _render_children(
    node: Node,
    *,
    prefix: str,
    indent: int,
    truncate: int,
    fields: Sequence[str],
    no_compact: bool,
    lines: list[str],
) -> None:
    last = len(node.children) - 1
    for position, child in enumerate(node.children):
        _render_node(
            child,
            prefix=prefix,
            is_last=position == last,
            indent=indent,
            truncate=truncate,
            fields=fields,
            no_compact=no_compact,
            lines=lines,
        )


def render_tree_lines(
    root: Node,
    *,
    indent: int = 4,
    truncate: int = 60,
    fields: Sequence[str] = (),
    no_compact: bool = False,
) -> list[str]:
    """Render *root* and its descendants, one output line per entry."""
    lines = [root.name]
    _render_children(
        root,
        prefix="",
        indent=max(indent, 1),
        truncate=truncate,
        fields=fields,
        no_compact=no_compact,
        lines=lines,
    )
    return lines


def render_summary_lines(stats: TreeStats, *, show_metadata_hint: bool = False) -> list[str]:
    lines = [
        "",
        "Tree Coverage Summary:",
        f"  Total Tracked Files: {stats.total_files}",
        f"  Analyzed:            {stats.analyzed_files} ({stats.coverage_percent:.1f}%)",
        f"  Matched:             {stats.matched_files}",
        "",
        "Note: This tree only includes files tracked by Git.",
    ]
    if show_metadata_hint:
        lines.append("Hint: To include metadata, use --db and --fields.")
    return lines


__all__ = ["render_summary_lines", "render_tree_lines", "truncate_value"]
