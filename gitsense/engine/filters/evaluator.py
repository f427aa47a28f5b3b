"""In-memory evaluation of filter conditions against one file's metadata.

Used identically by grep enrichment and tree enrichment. Pure: no I/O, no
mutation, and a comparison that cannot be made (non-numeric operand for a
numeric operator) is simply False.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from gitsense.core.enums import Operator
from gitsense.engine.filters.conditions import FieldTypeSchema, FilterCondition
from gitsense.engine.filters.values import ListValue, Scalar, resolve_value


def _to_float(text: str) -> float | None:
    try:
        return float(text.strip())
    except ValueError:
        return None


def _targets(value: str) -> list[str]:
    return [part.strip().lower() for part in value.split(",")]


def _compare_numbers(left: float, op: Operator, right: float) -> bool:
    if op == Operator.GT:
        return left > right
    if op == Operator.LT:
        return left < right
    if op == Operator.GE:
        return left >= right
    if op == Operator.LE:
        return left <= right
    return False


def _in_range(text: str, bounds: tuple[str, str]) -> bool:
    number = _to_float(text)
    low = _to_float(bounds[0])
    high = _to_float(bounds[1])
    if number is None or low is None or high is None:
        return False
    return low <= number <= high


def _check_scalar(text: str, cond: FilterCondition) -> bool:
    op = cond.operator
    if op in (Operator.GT, Operator.LT, Operator.GE, Operator.LE):
        left = _to_float(text)
        right = _to_float(cond.value)
        if left is None or right is None:
            return False
        return _compare_numbers(left, op, right)
    if op == Operator.RANGE:
        return _in_range(text, cond.range_bounds())

    value = text.strip().lower()
    target = cond.value.lower()
    if op == Operator.EQ:
        return value == target
    if op == Operator.NE:
        return value != target
    if op == Operator.IN:
        return value in _targets(cond.value)
    if op == Operator.NOT_IN:
        return value not in _targets(cond.value)
    if op == Operator.CONTAINS:
        return target in value
    if op == Operator.NOT_CONTAINS:
        return target not in value
    return False


def _check_list(items: tuple[str, ...], cond: FilterCondition) -> bool:
    op = cond.operator
    elements = [item.strip().lower() for item in items]
    target = cond.value.lower()
    if op == Operator.EQ:
        return target in elements
    if op == Operator.NE:
        return target not in elements
    if op == Operator.IN:
        wanted = set(_targets(cond.value))
        return any(element in wanted for element in elements)
    if op == Operator.NOT_IN:
        wanted = set(_targets(cond.value))
        return not any(element in wanted for element in elements)
    if op == Operator.CONTAINS:
        return any(target in element for element in elements)
    if op == Operator.NOT_CONTAINS:
        return not any(target in element for element in elements)
    # Ordering and ranges are undefined for lists.
    return False


def check_condition(
    fields: Mapping[str, object],
    cond: FilterCondition,
    field_types: FieldTypeSchema | None = None,
) -> bool:
    """Evaluate a single condition against a file's fields."""
    present = cond.field in fields
    if cond.operator == Operator.EXISTS:
        return present
    if cond.operator == Operator.NOT_EXISTS:
        return not present
    if not present:
        return False

    field_type = field_types.get(cond.field) if field_types else None
    value = resolve_value(fields[cond.field], field_type)
    if isinstance(value, ListValue):
        return _check_list(value.items, cond)
    if isinstance(value, Scalar):
        return _check_scalar(value.text, cond)
    return False


def check_filters(
    fields: Mapping[str, object],
    conditions: Sequence[FilterCondition],
    field_types: FieldTypeSchema | None = None,
) -> bool:
    """Return True iff every condition holds (AND). No conditions is True."""
    return all(check_condition(fields, cond, field_types) for cond in conditions)


__all__ = ["check_condition", "check_filters"]
