"""Metadata filter language: parsing, SQL pushdown, and in-memory evaluation."""

from gitsense.engine.filters.conditions import (
    FieldTypeSchema,
    FilterCondition,
    metadata_conditions,
    referenced_fields,
    system_conditions,
)
from gitsense.engine.filters.evaluator import check_condition, check_filters
from gitsense.engine.filters.parser import parse_filters, parse_single_filter
from gitsense.engine.filters.sql import build_where_clause
from gitsense.engine.filters.values import (
    ABSENT,
    ListValue,
    MetadataValue,
    Scalar,
    display_text,
    resolve_value,
)

__all__ = [
    "ABSENT",
    "FieldTypeSchema",
    "FilterCondition",
    "ListValue",
    "MetadataValue",
    "Scalar",
    "build_where_clause",
    "check_condition",
    "check_filters",
    "display_text",
    "metadata_conditions",
    "parse_filters",
    "parse_single_filter",
    "referenced_fields",
    "resolve_value",
    "system_conditions",
]
