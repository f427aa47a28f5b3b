"""Canonical enums for filter operators, field types, and output modes.

StrEnum values compare equal to their string values (Operator.EQ == "="),
so conditions serialise to JSON as plain strings.
"""

from __future__ import annotations

import enum


class Operator(enum.StrEnum):
    EQ = "="
    NE = "!="
    IN = "in"
    NOT_IN = "not in"
    CONTAINS = "~"
    NOT_CONTAINS = "!~"
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    EXISTS = "exists"
    NOT_EXISTS = "!exists"
    RANGE = "range"


class FieldType(enum.StrEnum):
    STRING = "string"
    NUMBER = "number"
    LIST = "list"


class AnalyzedFilter(enum.StrEnum):
    TRUE = "true"
    FALSE = "false"
    ALL = "all"


class TreeFormat(enum.StrEnum):
    HUMAN = "human"
    JSON = "json"
    AI_PORTABLE = "ai-portable"


NUMERIC_OPERATORS = frozenset({Operator.GT, Operator.LT, Operator.GE, Operator.LE})
STRING_SET_OPERATORS = frozenset(
    {Operator.IN, Operator.NOT_IN, Operator.CONTAINS, Operator.NOT_CONTAINS}
)
PRESENCE_OPERATORS = frozenset({Operator.EXISTS, Operator.NOT_EXISTS})
FILE_PATH_OPERATORS = frozenset(
    {Operator.EQ, Operator.NE, Operator.CONTAINS, Operator.NOT_CONTAINS}
)

# Reserved system field: lives on the files table, not in metadata_fields.
FILE_PATH_FIELD = "file_path"


def canonical_field_type(value: object) -> FieldType:
    """Normalize a stored field_type tag; unknown or blank tags read as string."""
    token = str(value or "").strip().lower()
    try:
        return FieldType(token)
    except ValueError:
        return FieldType.STRING


def canonical_analyzed_filter(value: object) -> AnalyzedFilter:
    """Normalize --analyzed input; anything unrecognised means 'all'."""
    token = str(value or "").strip().lower()
    try:
        return AnalyzedFilter(token)
    except ValueError:
        return AnalyzedFilter.ALL


__all__ = [
    "FILE_PATH_FIELD",
    "FILE_PATH_OPERATORS",
    "NUMERIC_OPERATORS",
    "PRESENCE_OPERATORS",
    "STRING_SET_OPERATORS",
    "AnalyzedFilter",
    "FieldType",
    "Operator",
    "TreeFormat",
    "canonical_analyzed_filter",
    "canonical_field_type",
]
