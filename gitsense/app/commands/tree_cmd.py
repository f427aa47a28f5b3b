"""tree command: git-tracked files as a metadata heat map or JSON."""

from __future__ import annotations

import argparse
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gitsense.app.commands.helpers.options import TreeOptions, tree_options_from_args
from gitsense.app.commands.helpers.repo import repo_context_or_root
from gitsense.app.commands.helpers.runtime import command_runtime
from gitsense.app.commands.helpers.store import store_session
from gitsense.app.output.tree_json import dumps, portable_payload, tree_payload
from gitsense.app.output.tree_text import render_summary_lines, render_tree_lines
from gitsense.core.enums import FieldType, TreeFormat
from gitsense.core.errors import FetchCancelledError, StoreUnavailableError
from gitsense.core.git import RepoContext, get_tracked_files
from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.metadata.fetcher import FileMetadata, fetch_metadata_map
from gitsense.engine.tree.builder import build_tree
from gitsense.engine.tree.enrich import enrich_tree, iter_file_paths
from gitsense.engine.tree.model import Node, TreeStats
from gitsense.engine.tree.visibility import calculate_stats, calculate_visibility, prune_tree

logger = logging.getLogger(__name__)

NO_DATABASE_GUIDANCE = """\
No manifest database specified.

'gsc tree' is designed to visualize your repository's intelligence layer.
To proceed, choose one of the following:

1. View the Intelligence Map (Recommended):
   Specify a database to see purpose, risk, and other metadata.
   $ gsc tree --db <name> --fields purpose

2. View the Raw File Tree:
   Show all tracked files without metadata enrichment.
   $ gsc tree --no-compact

Run 'gsc fields --list-databases' to see available databases in this workspace."""

FILTER_NEEDS_DATABASE = "database (--db) is required when using --filter"


@dataclass
class TreeView:
    root: Node
    stats: TreeStats
    conditions: list[FilterCondition] = field(default_factory=list)


def _fetch_for_tree(
    session, root: Node, options: TreeOptions, conditions, cancel
) -> dict[str, FileMetadata]:
    try:
        fetched = fetch_metadata_map(
            session.conn,
            iter_file_paths(root),
            fields=list(options.fields) or None,
            conditions=conditions,
            cancel=cancel,
            strict=True,
        )
    except FetchCancelledError:
        raise
    except StoreUnavailableError as exc:
        # Partial metadata would misreport matches; render with none instead.
        logger.warning("Rendering tree without metadata: %s", exc)
        return {}
    return fetched.metadata


def build_tree_view(
    options: TreeOptions,
    files: Sequence[str],
    repo: RepoContext,
    *,
    cancel: threading.Event | None = None,
    data_root: Path | None = None,
) -> TreeView:
    """Build, enrich, propagate visibility, optionally prune, and count."""
    root = build_tree(files, repo.cwd_offset, options.focus)
    conditions: list[FilterCondition] = []
    metadata: dict[str, FileMetadata] = {}
    field_types: dict[str, FieldType] | None = None

    if options.database:
        with store_session(options.database, data_root or repo.root) as session:
            conditions = session.parse(options.filter.filters)
            field_types = session.field_types
            metadata = _fetch_for_tree(session, root, options, conditions, cancel)
    elif options.filter.filters:
        raise StoreUnavailableError(FILTER_NEEDS_DATABASE)

    enrich_tree(root, metadata, conditions, field_types)
    calculate_visibility(root)
    if options.prune:
        prune_tree(root)
    return TreeView(root=root, stats=calculate_stats(root), conditions=conditions)


def render_tree_view(view: TreeView, options: TreeOptions, repo: RepoContext) -> str:
    if options.format == TreeFormat.JSON:
        return dumps(
            tree_payload(
                view.root,
                view.stats,
                cwd=repo.cwd_offset,
                database=options.database,
                fields=options.fields,
                filters=view.conditions,
                focus=options.focus,
                pruned=options.prune,
            )
        )
    if options.format == TreeFormat.AI_PORTABLE:
        return dumps(
            portable_payload(
                view.root,
                view.stats,
                cwd=repo.cwd_offset,
                fields=options.fields,
                pruned=options.prune,
            )
        )

    lines = render_tree_lines(
        view.root,
        indent=options.indent,
        truncate=options.truncate,
        fields=options.fields,
        no_compact=options.no_compact,
    )
    lines.extend(
        render_summary_lines(
            view.stats,
            show_metadata_hint=not options.database and not options.fields,
        )
    )
    return "\n".join(lines)


def needs_guidance(options: TreeOptions) -> bool:
    """A bare human-format tree with no database would show nothing useful."""
    return (
        not options.database
        and not options.no_compact
        and options.format == TreeFormat.HUMAN
    )


def cmd_tree(args: argparse.Namespace) -> None:
    """Render the tracked-file tree for the current directory."""
    runtime = command_runtime(args)
    options = tree_options_from_args(args, runtime.config)
    if needs_guidance(options):
        print(NO_DATABASE_GUIDANCE)
        return

    repo = repo_context_or_root(runtime)
    files = get_tracked_files(repo.root)
    view = build_tree_view(options, files, repo, data_root=runtime.root)
    print(render_tree_view(view, options, repo))


__all__ = [
    "NO_DATABASE_GUIDANCE",
    "TreeView",
    "build_tree_view",
    "cmd_tree",
    "needs_guidance",
    "render_tree_view",
]
