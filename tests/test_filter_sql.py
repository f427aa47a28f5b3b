"""Tests for gitsense.engine.filters.sql (WHERE construction and pushdown)."""

import pytest

from gitsense.core.enums import AnalyzedFilter, Operator
from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.filters.evaluator import check_filters
from gitsense.engine.filters.parser import parse_filters
from gitsense.engine.filters.sql import (
    build_condition_sql,
    build_file_condition_sql,
    build_where_clause,
)
from gitsense.engine.metadata.fetcher import fetch_metadata_map
from gitsense.engine.metadata.store import open_store

from conftest import create_manifest


def _select_paths(conn, where, args):
    rows = conn.execute(f"SELECT f.file_path FROM files f {where} ORDER BY 1", args)
    return [row[0] for row in rows]


def _fields_by_path(conn):
    result = {}
    rows = conn.execute(
        "SELECT f.file_path, mf.field_name, fm.field_value FROM files f "
        "LEFT JOIN file_metadata fm ON fm.file_path = f.file_path "
        "LEFT JOIN metadata_fields mf ON mf.field_id = fm.field_id"
    )
    for path, name, value in rows:
        entry = result.setdefault(path, {})
        if name is not None:
            entry[name] = value
    return result


# ===========================================================================
# System filters
# ===========================================================================

class TestSystemFilters:
    def test_nothing_to_filter(self):
        assert build_where_clause([], AnalyzedFilter.ALL, ()) == ("", [])

    def test_analyzed_true(self):
        where, args = build_where_clause([], AnalyzedFilter.TRUE)
        assert where == "WHERE f.chat_id IS NOT NULL"
        assert args == []

    def test_analyzed_false_plain_string(self):
        where, _ = build_where_clause([], "false")
        assert where == "WHERE f.chat_id IS NULL"

    def test_globs_are_ored(self):
        where, args = build_where_clause([], AnalyzedFilter.ALL, ["internal/*", "pkg/*"])
        assert where == "WHERE (f.file_path LIKE ? OR f.file_path LIKE ?)"
        assert args == ["internal/%", "pkg/%"]

    @pytest.mark.parametrize(
        "op, sql, arg",
        [
            ("=", "f.file_path = ?", "src/a.go"),
            ("!=", "f.file_path != ?", "src/a.go"),
            ("~", "f.file_path LIKE ?", "%src/a.go%"),
            ("!~", "f.file_path NOT LIKE ?", "%src/a.go%"),
        ],
    )
    def test_file_path_conditions(self, op, sql, arg):
        cond = FilterCondition("file_path", Operator(op), "src/a.go")
        assert build_file_condition_sql(cond) == (sql, [arg])

    def test_file_path_rejects_other_operators(self):
        with pytest.raises(ValueError):
            build_file_condition_sql(FilterCondition("file_path", Operator.GT, "1"))

    def test_metadata_skipped_when_not_pushed(self):
        conditions = [FilterCondition("risk_level", Operator.EQ, "high")]
        assert build_where_clause(conditions, include_metadata=False) == ("", [])

    def test_custom_path_column(self):
        sql, _ = build_condition_sql(
            FilterCondition("risk_level", Operator.EXISTS), path_column="p.value"
        )
        assert "fm2.file_path = p.value" in sql


# ===========================================================================
# Pushdown against a real database
# ===========================================================================

PUSHDOWN_FILTERS = [
    "risk_level=high",
    "risk_level=HIGH",
    "risk_level!=high",
    "topics=auth",
    "topics in db,parsing",
    "topics not in parsing",
    "topics~secur",
    "purpose~login",
    "purpose!~login",
    "loc>50",
    "loc<=40",
    "loc=30..130",
    "purpose exists",
    "purpose !exists",
    "risk_level=50%_off",
    "file_path~src/",
    "layer=core;loc>100",
]


class TestPushdown:
    @pytest.mark.parametrize("filter_text", PUSHDOWN_FILTERS)
    def test_prefilter_admits_every_real_match(self, manifest_conn, field_types, filter_text):
        conditions = parse_filters([filter_text], field_types)
        where, args = build_where_clause(conditions)
        pushed = set(_select_paths(manifest_conn, where, args))
        fields = _fields_by_path(manifest_conn)
        exact = {
            path
            for path, values in fields.items()
            if check_filters(values, [c for c in conditions if not c.is_system], field_types)
            and (not any(c.is_system for c in conditions) or path.startswith("src/"))
        }
        assert exact <= pushed

    def test_value_conditions_push_presence_only(self, manifest_conn, field_types):
        conditions = parse_filters(["risk_level=high"], field_types)
        where, args = build_where_clause(conditions)
        assert args == ["risk_level"]
        assert _select_paths(manifest_conn, where, args) == ["docs/c.md", "src/a.go", "src/b.go"]

    def test_not_exists_is_exact(self, manifest_conn, field_types):
        conditions = parse_filters(["purpose !exists"], field_types)
        where, args = build_where_clause(conditions)
        assert _select_paths(manifest_conn, where, args) == ["src/b.go", "src/pending.go"]

    def test_numeric_with_analyzed(self, manifest_conn, field_types):
        conditions = parse_filters(["loc>50"], field_types)
        where, args = build_where_clause(conditions, AnalyzedFilter.TRUE, ["src/*"])
        assert _select_paths(manifest_conn, where, args) == ["src/a.go", "src/b.go"]


# ===========================================================================
# Values SQL cannot compare the way the evaluator does
# ===========================================================================

AWKWARD_FILES = {
    "x/escaped.go": (1, {"topics": '["a\\u003cb"]'}),
    "x/underscore.go": (2, {"loc": "1_000"}),
    "x/inf.go": (3, {"loc": "inf"}),
    "x/spaced.go": (4, {"loc": " 900 "}),
    "x/upper.go": (5, {"purpose": "ÉCOLE"}),
}


class TestPushdownKeepsEvaluatorMatches:
    @pytest.fixture()
    def awkward_conn(self, tmp_path):
        path = create_manifest(tmp_path / ".gitsense" / "odd.db", AWKWARD_FILES)
        conn = open_store(path)
        yield conn
        conn.close()

    @pytest.mark.parametrize(
        "filter_text, path",
        [
            ("topics=a<b", "x/escaped.go"),
            ("topics~<", "x/escaped.go"),
            ("loc>500", "x/underscore.go"),
            ("loc>500", "x/inf.go"),
            ("loc=800..1000", "x/spaced.go"),
            ("purpose=école", "x/upper.go"),
        ],
    )
    def test_match_survives_pushdown(self, awkward_conn, field_types, filter_text, path):
        conditions = parse_filters([filter_text], field_types)
        paths = list(AWKWARD_FILES)
        plain = fetch_metadata_map(awkward_conn, paths, conditions=conditions)
        assert check_filters(plain.metadata[path].fields, conditions, field_types)

        pushed = fetch_metadata_map(awkward_conn, paths, conditions=conditions, pushdown=True)
        assert path in pushed.metadata

    def test_missing_field_still_pruned(self, awkward_conn, field_types):
        conditions = parse_filters(["loc>500"], field_types)
        pushed = fetch_metadata_map(
            awkward_conn, list(AWKWARD_FILES), conditions=conditions, pushdown=True
        )
        assert sorted(pushed.metadata) == ["x/inf.go", "x/spaced.go", "x/underscore.go"]
