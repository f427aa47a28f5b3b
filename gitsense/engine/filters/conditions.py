"""Filter condition model shared by the parser, SQL builder, and evaluator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from gitsense.core.enums import FILE_PATH_FIELD, FieldType, Operator

FieldTypeSchema = Mapping[str, FieldType]


@dataclass(frozen=True)
class FilterCondition:
    field: str
    operator: Operator
    value: str = ""

    @property
    def is_system(self) -> bool:
        """True for conditions on files-table columns rather than metadata."""
        return self.field == FILE_PATH_FIELD

    def range_bounds(self) -> tuple[str, str]:
        """Split a range value "min..max" into its two bound strings."""
        low, _, high = self.value.partition("..")
        return low, high

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "operator": str(self.operator), "value": self.value}

    def __str__(self) -> str:
        if self.operator == Operator.RANGE:
            return f"{self.field}={self.value}"
        if self.operator in (Operator.EXISTS, Operator.NOT_EXISTS):
            return f"{self.field} {self.operator}"
        if self.operator in (Operator.IN, Operator.NOT_IN):
            return f"{self.field} {self.operator} {self.value}"
        return f"{self.field}{self.operator}{self.value}"


def metadata_conditions(conditions: Iterable[FilterCondition]) -> list[FilterCondition]:
    """Drop system conditions, which the metadata query already enforces."""
    return [cond for cond in conditions if not cond.is_system]


def system_conditions(conditions: Iterable[FilterCondition]) -> list[FilterCondition]:
    return [cond for cond in conditions if cond.is_system]


def referenced_fields(conditions: Iterable[FilterCondition]) -> list[str]:
    """Metadata field names referenced by *conditions*, in first-seen order."""
    seen: dict[str, None] = {}
    for cond in conditions:
        if not cond.is_system:
            seen.setdefault(cond.field, None)
    return list(seen)


__all__ = [
    "FieldTypeSchema",
    "FilterCondition",
    "metadata_conditions",
    "referenced_fields",
    "system_conditions",
]
