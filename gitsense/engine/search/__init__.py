"""Code search: ripgrep matches enriched and aggregated with file metadata."""

from gitsense.engine.search.aggregator import aggregate_matches
from gitsense.engine.search.enricher import enrich_matches, unique_paths
from gitsense.engine.search.models import (
    FileSummary,
    GrepSummary,
    MatchResult,
    RawMatch,
    SearchOptions,
    SearchRun,
)
from gitsense.engine.search.payload import QueryContext, build_response
from gitsense.engine.search.ripgrep import RipgrepEngine, parse_json_output
from gitsense.engine.search.stats import SearchRecord, record_search

__all__ = [
    "FileSummary",
    "GrepSummary",
    "MatchResult",
    "QueryContext",
    "RawMatch",
    "RipgrepEngine",
    "SearchOptions",
    "SearchRecord",
    "SearchRun",
    "aggregate_matches",
    "build_response",
    "enrich_matches",
    "parse_json_output",
    "record_search",
    "unique_paths",
]
