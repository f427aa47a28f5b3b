"""grep command: ripgrep search enriched with manifest metadata, as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
from pathlib import Path

from gitsense.app.commands.helpers.options import GrepOptions, grep_options_from_args
from gitsense.app.commands.helpers.repo import repo_context_or_root
from gitsense.app.commands.helpers.runtime import command_runtime
from gitsense.app.commands.helpers.store import store_session
from gitsense.core.errors import StoreUnavailableError
from gitsense.core.git import RepoContext, get_remote_url
from gitsense.engine.metadata.fetcher import fetch_metadata_map
from gitsense.engine.search.aggregator import aggregate_matches
from gitsense.engine.search.enricher import enrich_matches, unique_paths
from gitsense.engine.search.models import GrepSummary, SearchRun
from gitsense.engine.search.payload import QueryContext, build_response
from gitsense.engine.search.ripgrep import RipgrepEngine
from gitsense.engine.search.stats import SearchRecord, record_search, stats_path

logger = logging.getLogger(__name__)

DATABASE_REQUIRED = (
    "database is required. Use --db or set a default with "
    "'gsc config set default_database <name>'"
)


def run_grep(
    options: GrepOptions,
    repo: RepoContext,
    *,
    engine: RipgrepEngine | None = None,
    remote: str = "",
    data_root: Path | None = None,
) -> tuple[dict, GrepSummary, SearchRun]:
    """Search, enrich, filter and aggregate; return the response payload.

    Filters are parsed before the search runs so a bad filter never costs a
    full ripgrep pass.
    """
    if not options.database:
        raise StoreUnavailableError(DATABASE_REQUIRED)

    engine = engine or RipgrepEngine()
    search_dir = repo.root / repo.cwd_offset if repo.cwd_offset else repo.root
    with store_session(options.database, data_root or repo.root) as session:
        conditions = session.parse(options.filter.filters)
        run = engine.search(options.search, search_dir, path_prefix=repo.cwd_offset)
        fetched = fetch_metadata_map(
            session.conn,
            unique_paths(run.matches),
            analyzed=options.filter.analyzed,
            file_globs=options.filter.file_globs,
            conditions=conditions,
            strict=False,
            pushdown=True,
        )
        matches = enrich_matches(
            run.matches, fetched.metadata, conditions, session.field_types
        )

    summary = aggregate_matches(matches, options.limit)
    context = QueryContext(
        pattern=options.search.pattern,
        database=options.database,
        mode="summary" if options.summary_only else "full",
        tool_name=run.tool_name,
        tool_version=run.tool_version,
        arguments=tuple(run.arguments),
        duration_ms=run.duration_ms,
        file_type=options.search.file_type,
        context_lines=options.search.context_lines,
        case_sensitive=options.search.case_sensitive,
        filters=options.filter.filters,
        analyzed=str(options.filter.analyzed),
        file_globs=options.filter.file_globs,
        project_root=str(repo.root),
        repository=repo.root.name,
        remote=remote,
    )
    payload = build_response(
        context, summary, matches, summary_only=options.summary_only, limit=options.limit
    )
    return payload, summary, run


def _record_stats(options: GrepOptions, summary: GrepSummary, run: SearchRun, root: Path) -> None:
    record = SearchRecord(
        pattern=options.search.pattern,
        tool_name=run.tool_name,
        tool_version=run.tool_version,
        duration_ms=run.duration_ms,
        total_matches=summary.total_matches,
        total_files=summary.total_files,
        analyzed_files=summary.analyzed_files,
        database_name=options.database,
        case_sensitive=options.search.case_sensitive,
        filters=options.filter.filters,
        file_filters=options.filter.file_globs,
        analyzed_filter=str(options.filter.analyzed),
    )
    try:
        record_search(record, stats_path(root))
    except (sqlite3.Error, OSError) as exc:
        logger.debug("Failed to record search stats: %s", exc)


def cmd_grep(args: argparse.Namespace) -> None:
    """Search code and print the enriched JSON response."""
    runtime = command_runtime(args)
    options = grep_options_from_args(args, runtime.config)
    repo = repo_context_or_root(runtime)

    payload, summary, run = run_grep(
        options, repo, remote=get_remote_url(repo.root), data_root=runtime.root
    )
    print(json.dumps(payload, indent=2, ensure_ascii=False))

    if options.record_stats:
        _record_stats(options, summary, run, runtime.root)


__all__ = ["DATABASE_REQUIRED", "cmd_grep", "run_grep"]
