"""JSON renderings of the metadata tree: full and AI-portable."""

from __future__ import annotations

import json
from collections.abc import Sequence

from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.tree.model import Node, TreeStats

TREE_JSON_VERSION = "1.1.0"
PORTABLE_ABOUT = (
    "This JSON represents a hierarchical Git tree. Each node represents a file "
    "or directory. Metadata is included for files where available to provide "
    "additional context for analysis."
)


def tree_payload(
    root: Node,
    stats: TreeStats,
    *,
    cwd: str,
    database: str,
    fields: Sequence[str],
    filters: Sequence[FilterCondition],
    focus: Sequence[str],
    pruned: bool,
) -> dict:
    return {
        "version": TREE_JSON_VERSION,
        "context": {
            "cwd": cwd,
            "database": database,
            "fields": list(fields),
            "filters": [cond.to_dict() for cond in filters],
            "focus": list(focus),
            "pruned": pruned,
        },
        "stats": stats.to_dict(),
        "tree": root.to_dict(),
    }


def portable_payload(
    root: Node, stats: TreeStats, *, cwd: str, fields: Sequence[str], pruned: bool
) -> dict:
    """Reduced shape: no chat ids, visibility, or analyzed flags."""
    return {
        "context": {
            "about": PORTABLE_ABOUT,
            "cwd": cwd,
            "fields": list(fields),
            "pruned": pruned,
        },
        "stats": stats.to_portable_dict(),
        "tree": root.to_portable_dict(),
    }


def dumps(payload: dict) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = ["PORTABLE_ABOUT", "TREE_JSON_VERSION", "dumps", "portable_payload", "tree_payload"]
