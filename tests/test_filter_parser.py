"""Tests for gitsense.engine.filters.parser."""

import pytest

from gitsense.core.enums import FieldType, Operator
from gitsense.core.errors import (
    FilterSyntaxError,
    IncompatibleOperatorError,
    InvalidRangeError,
    UnknownFieldError,
)
from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.filters.parser import parse_filters, parse_single_filter

SCHEMA = {
    "risk_level": FieldType.STRING,
    "topics": FieldType.LIST,
    "loc": FieldType.NUMBER,
    "domain": FieldType.STRING,
    "min_loc": FieldType.NUMBER,
    "layer": FieldType.STRING,
}


# ===========================================================================
# Operators
# ===========================================================================

class TestParseSingleFilter:
    def test_equality(self):
        cond = parse_single_filter("risk_level=high", SCHEMA)
        assert cond == FilterCondition("risk_level", Operator.EQ, "high")

    @pytest.mark.parametrize(
        "text, op, value",
        [
            ("risk_level!=low", Operator.NE, "low"),
            ("loc>=10", Operator.GE, "10"),
            ("loc<=10", Operator.LE, "10"),
            ("loc>10", Operator.GT, "10"),
            ("loc<10", Operator.LT, "10"),
            ("risk_level~hi", Operator.CONTAINS, "hi"),
            ("risk_level!~hi", Operator.NOT_CONTAINS, "hi"),
        ],
    )
    def test_symbol_operators(self, text, op, value):
        cond = parse_single_filter(text, SCHEMA)
        assert cond.operator == op
        assert cond.value == value

    def test_whitespace_around_operator(self):
        cond = parse_single_filter("  risk_level  =  high ", SCHEMA)
        assert cond == FilterCondition("risk_level", Operator.EQ, "high")

    def test_in_list(self):
        cond = parse_single_filter("layer in cli,core", SCHEMA)
        assert cond == FilterCondition("layer", Operator.IN, "cli,core")

    def test_not_in_beats_in(self):
        cond = parse_single_filter("layer not in cli,core", SCHEMA)
        assert cond == FilterCondition("layer", Operator.NOT_IN, "cli,core")

    def test_in_inside_field_name_is_not_an_operator(self):
        cond = parse_single_filter("domain=billing", SCHEMA)
        assert cond == FilterCondition("domain", Operator.EQ, "billing")

    def test_in_inside_value_is_not_an_operator(self):
        cond = parse_single_filter("layer=infra", SCHEMA)
        assert cond.operator == Operator.EQ
        assert cond.value == "infra"

    def test_exists(self):
        cond = parse_single_filter("topics exists", SCHEMA)
        assert cond == FilterCondition("topics", Operator.EXISTS, "")

    def test_not_exists(self):
        cond = parse_single_filter("topics !exists", SCHEMA)
        assert cond == FilterCondition("topics", Operator.NOT_EXISTS, "")

    def test_exists_with_value_rejected(self):
        with pytest.raises(FilterSyntaxError):
            parse_single_filter("topics exists yes", SCHEMA)

    def test_no_operator(self):
        with pytest.raises(FilterSyntaxError):
            parse_single_filter("risk_level", SCHEMA)

    def test_missing_field_name(self):
        with pytest.raises(FilterSyntaxError):
            parse_single_filter("=high", SCHEMA)


# ===========================================================================
# Ranges
# ===========================================================================

class TestRangeFilters:
    def test_range(self):
        cond = parse_single_filter("loc=10..50", SCHEMA)
        assert cond == FilterCondition("loc", Operator.RANGE, "10..50")

    def test_decimal_and_negative_bounds(self):
        cond = parse_single_filter("loc=-1.5..2.25", SCHEMA)
        assert cond.value == "-1.5..2.25"
        assert cond.range_bounds() == ("-1.5", "2.25")

    def test_non_numeric_bound(self):
        with pytest.raises(InvalidRangeError):
            parse_single_filter("loc=abc..50", SCHEMA)

    def test_missing_bound(self):
        with pytest.raises(InvalidRangeError):
            parse_single_filter("loc=10..", SCHEMA)

    def test_too_many_parts(self):
        with pytest.raises(InvalidRangeError):
            parse_single_filter("loc=1..2..3", SCHEMA)

    def test_range_on_unknown_field(self):
        with pytest.raises(UnknownFieldError):
            parse_single_filter("size=1..2", SCHEMA)


# ===========================================================================
# Schema validation
# ===========================================================================

class TestSchemaValidation:
    def test_unknown_field_lists_available(self):
        with pytest.raises(UnknownFieldError) as excinfo:
            parse_single_filter("color=red", SCHEMA)
        assert excinfo.value.field == "color"
        assert excinfo.value.available == sorted(SCHEMA)
        assert "risk_level" in str(excinfo.value)

    def test_file_path_is_reserved(self):
        cond = parse_single_filter("file_path~internal/", SCHEMA)
        assert cond == FilterCondition("file_path", Operator.CONTAINS, "internal/")
        assert cond.is_system

    def test_file_path_rejects_numeric_operator(self):
        with pytest.raises(IncompatibleOperatorError):
            parse_single_filter("file_path>3", SCHEMA)

    def test_list_field_rejects_numeric(self):
        with pytest.raises(IncompatibleOperatorError) as excinfo:
            parse_single_filter("topics>3", SCHEMA)
        assert "topics" in str(excinfo.value)
        assert ">" in str(excinfo.value)

    @pytest.mark.parametrize("text", ["loc in 1,2", "loc not in 1,2", "loc~1", "loc!~1"])
    def test_number_field_rejects_string_set_operators(self, text):
        with pytest.raises(IncompatibleOperatorError):
            parse_single_filter(text, SCHEMA)

    def test_number_field_allows_equality(self):
        assert parse_single_filter("loc=40", SCHEMA).operator == Operator.EQ

    def test_list_field_allows_in(self):
        assert parse_single_filter("topics in auth,db", SCHEMA).operator == Operator.IN


# ===========================================================================
# parse_filters
# ===========================================================================

class TestParseFilters:
    def test_semicolon_and_repeated_flags_preserve_order(self):
        conditions = parse_filters(
            ["risk_level=high;loc>10", "layer in cli,core"], SCHEMA
        )
        assert [c.field for c in conditions] == ["risk_level", "loc", "layer"]

    def test_blank_parts_skipped(self):
        assert parse_filters(["", " ; ;"], SCHEMA) == []

    def test_error_in_any_part_propagates(self):
        with pytest.raises(UnknownFieldError):
            parse_filters(["risk_level=high;bogus=1"], SCHEMA)

    def test_str_renders_parseable_text(self):
        conditions = parse_filters(
            ["loc=10..50", "layer not in a,b", "topics exists", "risk_level!=low"], SCHEMA
        )
        rendered = [str(cond) for cond in conditions]
        assert rendered == ["loc=10..50", "layer not in a,b", "topics exists", "risk_level!=low"]
        assert parse_filters(rendered, SCHEMA) == conditions
