"""Parse filter strings ("risk_level=high", "loc=10..50", "layer in cli,core").

Each filter string may hold several ``;``-separated conditions. Every
condition from every string is ANDed, and input order is preserved.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from gitsense.core.enums import (
    FILE_PATH_FIELD,
    FILE_PATH_OPERATORS,
    NUMERIC_OPERATORS,
    STRING_SET_OPERATORS,
    FieldType,
    Operator,
)
from gitsense.core.errors import (
    FilterSyntaxError,
    IncompatibleOperatorError,
    InvalidRangeError,
    UnknownFieldError,
)
from gitsense.engine.filters.conditions import FieldTypeSchema, FilterCondition

logger = logging.getLogger(__name__)

# Candidates in precedence order. When two candidates start at the same
# offset the longer one wins, so ">=" beats ">" and "!exists" beats "exists".
_OPERATOR_TOKENS: tuple[str, ...] = (
    "!=",
    ">=",
    "<=",
    "!~",
    "~",
    "in",
    "not in",
    "=",
    ">",
    "<",
    "exists",
    "!exists",
)

# Word operators must stand alone so "domain" or "min_loc" are never split.
_WORD_PATTERNS: dict[str, re.Pattern[str]] = {
    "in": re.compile(r"(?<![\w!])in(?!\w)"),
    "not in": re.compile(r"(?<!\w)not\s+in(?!\w)"),
    "exists": re.compile(r"(?<![\w!])exists(?!\w)"),
    "!exists": re.compile(r"!exists(?!\w)"),
}


def _locate(text: str, token: str) -> tuple[int, int] | None:
    pattern = _WORD_PATTERNS.get(token)
    if pattern is not None:
        match = pattern.search(text)
        return (match.start(), match.end()) if match else None
    start = text.find(token)
    return (start, start + len(token)) if start >= 0 else None


def _find_operator(text: str) -> tuple[Operator, int, int] | None:
    best: tuple[str, int, int] | None = None
    for token in _OPERATOR_TOKENS:
        span = _locate(text, token)
        if span is None:
            continue
        if best is None or span[0] < best[1] or (
            span[0] == best[1] and len(token) > len(best[0])
        ):
            best = (token, span[0], span[1])
    if best is None:
        return None
    token, start, end = best
    return Operator(token), start, end


def _check_field(field: str, field_types: FieldTypeSchema) -> None:
    if field != FILE_PATH_FIELD and field not in field_types:
        raise UnknownFieldError(field, list(field_types))


def validate_operator(field: str, op: Operator, field_types: FieldTypeSchema) -> None:
    """Reject operators that make no sense for the field's declared type."""
    if field == FILE_PATH_FIELD:
        if op not in FILE_PATH_OPERATORS:
            raise IncompatibleOperatorError(
                field, op, "Use =, !=, ~ or !~ for file_path."
            )
        return

    field_type = field_types.get(field)
    if field_type == FieldType.LIST and op in NUMERIC_OPERATORS:
        raise IncompatibleOperatorError(
            field, op, f"Numeric operators do not apply to list field '{field}'; use in, = or !=."
        )
    if field_type == FieldType.NUMBER and op in STRING_SET_OPERATORS:
        raise IncompatibleOperatorError(
            field, op, f"String operators do not apply to numeric field '{field}'; use =, !=, >, <, >= or <=."
        )


def parse_range_filter(text: str, field_types: FieldTypeSchema) -> FilterCondition:
    """Parse "field=min..max" into a RANGE condition."""
    field, _, range_text = text.partition("=")
    field = field.strip()
    if not field:
        raise FilterSyntaxError(f"missing field name in range filter: {text}")
    _check_field(field, field_types)
    if field == FILE_PATH_FIELD:
        validate_operator(field, Operator.RANGE, field_types)

    bounds = range_text.strip().split("..")
    if len(bounds) != 2:
        raise InvalidRangeError(
            f"invalid range format, expected 'min..max': {range_text.strip()}"
        )
    low, high = (bound.strip() for bound in bounds)
    for label, bound in (("min", low), ("max", high)):
        try:
            float(bound)
        except ValueError:
            raise InvalidRangeError(f"range {label} must be numeric: {bound!r}") from None

    return FilterCondition(field=field, operator=Operator.RANGE, value=f"{low}..{high}")


def parse_single_filter(text: str, field_types: FieldTypeSchema) -> FilterCondition:
    """Parse one "field OP value" condition and validate it against the schema."""
    if "=" in text and ".." in text:
        return parse_range_filter(text, field_types)

    found = _find_operator(text)
    if found is None:
        raise FilterSyntaxError(f"unknown operator in filter: {text}")
    op, start, end = found

    field = text[:start].strip()
    value = text[end:].strip()
    if not field:
        raise FilterSyntaxError(f"missing field name in filter: {text}")
    if op in (Operator.EXISTS, Operator.NOT_EXISTS) and value:
        raise FilterSyntaxError(f"'{op}' takes no value: {text}")

    _check_field(field, field_types)
    validate_operator(field, op, field_types)
    return FilterCondition(field=field, operator=op, value=value)


def parse_filters(
    filter_strings: Iterable[str], field_types: FieldTypeSchema
) -> list[FilterCondition]:
    """Parse every filter string (and each ``;`` part) into ordered conditions."""
    conditions: list[FilterCondition] = []
    for filter_str in filter_strings:
        for part in filter_str.split(";"):
            part = part.strip()
            if not part:
                continue
            conditions.append(parse_single_filter(part, field_types))
    if conditions:
        logger.debug("Parsed %d filter condition(s): %s", len(conditions), conditions)
    return conditions


__all__ = [
    "parse_filters",
    "parse_range_filter",
    "parse_single_filter",
    "validate_operator",
]
