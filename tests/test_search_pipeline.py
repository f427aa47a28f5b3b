"""Tests for grep enrichment, aggregation, and the JSON response."""

import json
import sqlite3
from datetime import datetime, timezone

from gitsense.core.enums import FieldType, Operator
from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.metadata.fetcher import FileMetadata
from gitsense.engine.search.aggregator import MAX_CATEGORICAL_LENGTH, aggregate_matches
from gitsense.engine.search.enricher import enrich_matches, unique_paths
from gitsense.engine.search.models import MatchResult, RawMatch
from gitsense.engine.search.payload import QueryContext, build_response
from gitsense.engine.search.stats import SearchRecord, record_search


def _match(path, line=1, **metadata):
    return MatchResult(
        file_path=path,
        line_number=line,
        line_text="x",
        chat_id=1 if metadata else None,
        metadata=metadata,
    )


# ===========================================================================
# enrich_matches
# ===========================================================================

class TestEnrichMatches:
    def _raw(self):
        return [
            RawMatch("src/a.go", 1, "one"),
            RawMatch("src/b.go", 2, "two"),
            RawMatch("src/a.go", 9, "three", ["before"], ["after"]),
            RawMatch("vendor/x.go", 3, "four"),
        ]

    def _metadata(self):
        return {
            "src/a.go": FileMetadata(1, {"risk_level": "high", "topics": '["auth"]'}),
            "src/b.go": FileMetadata(2, {"risk_level": "low"}),
        }

    def test_unique_paths_first_seen_order(self):
        assert unique_paths(self._raw()) == ["src/a.go", "src/b.go", "vendor/x.go"]

    def test_paths_missing_from_fetch_are_dropped(self):
        enriched = enrich_matches(self._raw(), self._metadata())
        assert [m.file_path for m in enriched] == ["src/a.go", "src/b.go", "src/a.go"]
        assert enriched[2].context_before == ["before"]
        assert enriched[0].chat_id == 1

    def test_metadata_filter_applied(self):
        conds = [FilterCondition("topics", Operator.EQ, "auth")]
        enriched = enrich_matches(
            self._raw(), self._metadata(), conds, {"topics": FieldType.LIST}
        )
        assert {m.file_path for m in enriched} == {"src/a.go"}
        assert len(enriched) == 2

    def test_system_conditions_not_reevaluated(self):
        # file_path is enforced by the query; the evaluator never sees it.
        conds = [FilterCondition("file_path", Operator.EQ, "elsewhere")]
        assert len(enrich_matches(self._raw(), self._metadata(), conds)) == 3

    def test_unanalyzed_file_kept_without_filters(self):
        metadata = {"src/a.go": FileMetadata(None, {})}
        [first, second] = enrich_matches(self._raw(), metadata)
        assert first.analyzed is False
        assert "metadata" not in first.to_dict()
        assert second.line_number == 9


# ===========================================================================
# aggregate_matches
# ===========================================================================

class TestAggregateMatches:
    def _matches(self):
        return (
            [_match("a.go", risk="high")] * 5
            + [_match("b.go", risk="low")] * 3
            + [_match("c.go", risk="high")] * 3
            + [_match("d.go")]
            + [_match("e.go", risk="low")]
        )

    def test_counts_and_order(self):
        summary = aggregate_matches(self._matches())
        assert summary.total_matches == 13
        assert summary.total_files == 5
        assert [f.file_path for f in summary.files] == ["a.go", "b.go", "c.go", "d.go", "e.go"]
        assert [f.match_count for f in summary.files] == [5, 3, 3, 1, 1]
        assert summary.analyzed_files == 4
        assert summary.unanalyzed_files == 1
        assert summary.is_truncated is False

    def test_distribution_counts_matches(self):
        summary = aggregate_matches(self._matches())
        assert summary.field_distribution == {"risk": {"high": 8, "low": 4}}

    def test_limit_truncates_but_keeps_totals(self):
        summary = aggregate_matches(self._matches(), limit=2)
        assert [f.match_count for f in summary.files] == [5, 3]
        assert summary.total_files == 5
        assert summary.total_matches == 13
        assert summary.is_truncated is True

    def test_limit_not_exceeded(self):
        summary = aggregate_matches(self._matches(), limit=5)
        assert summary.is_truncated is False

    def test_repeatable(self):
        matches = self._matches()
        assert aggregate_matches(matches).to_dict() == aggregate_matches(matches).to_dict()

    def test_free_text_values_skipped(self):
        long_text = "x" * (MAX_CATEGORICAL_LENGTH + 1)
        summary = aggregate_matches(
            [_match("a.go", purpose=long_text, note="two\nlines", layer="core")]
        )
        assert summary.field_distribution == {"layer": {"core": 1}}

    def test_empty(self):
        summary = aggregate_matches([])
        assert summary.to_dict()["files"] == []
        assert summary.total_files == 0


# ===========================================================================
# build_response
# ===========================================================================

class TestBuildResponse:
    def _context(self):
        return QueryContext(
            pattern="Login",
            database="arch",
            mode="summary",
            tool_name="ripgrep",
            tool_version="14.1.0",
            filters=("risk_level=high",),
            timestamp=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )

    def test_context_shape(self):
        context = self._context().to_dict()
        assert context["pattern"] == "Login"
        assert context["tool"]["name"] == "ripgrep"
        assert context["filters"]["metadata"] == ["risk_level=high"]
        assert context["filters"]["analyzed"] == "all"
        assert context["timestamp"].startswith("2024-01-02")

    def test_summary_mode_with_hint(self):
        summary = aggregate_matches([_match("a.go"), _match("b.go")], limit=1)
        response = build_response(self._context(), summary, [], summary_only=True, limit=1)
        assert "matches" not in response
        assert response["summary"]["is_truncated"] is True
        assert "--limit 0" in response["hint"]
        json.dumps(response)

    def test_summary_mode_without_truncation_has_no_hint(self):
        summary = aggregate_matches([_match("a.go")])
        response = build_response(self._context(), summary, [], summary_only=True)
        assert "hint" not in response

    def test_full_mode_lists_matches(self):
        matches = [_match("a.go", risk="high")]
        response = build_response(
            self._context(), aggregate_matches(matches), matches, summary_only=False
        )
        assert "summary" not in response
        assert response["matches"][0]["metadata"] == {"risk": "high"}


# ===========================================================================
# record_search
# ===========================================================================

class TestRecordSearch:
    def test_appends_rows(self, tmp_path):
        target = tmp_path / ".gitsense" / "stats.db"
        record = SearchRecord(
            pattern="Login",
            tool_name="ripgrep",
            tool_version="14.1.0",
            duration_ms=12,
            total_matches=3,
            total_files=2,
            analyzed_files=1,
            database_name="arch",
            case_sensitive=False,
            filters=("risk_level=high",),
        )
        record_search(record, target)
        record_search(record, target)

        conn = sqlite3.connect(target)
        try:
            rows = conn.execute(
                "SELECT pattern, filters_used, case_sensitive FROM search_history"
            ).fetchall()
        finally:
            conn.close()
        assert rows == [("Login", '["risk_level=high"]', 0)] * 2
