"""Domain exceptions raised by the filter, store, and search layers."""

from __future__ import annotations


class FilterError(ValueError):
    """Base class for recoverable filter-string problems."""


class FilterSyntaxError(FilterError):
    """Raised when a filter string has no recognisable operator."""


class UnknownFieldError(FilterError):
    """Raised when a filter names a field the database does not define."""

    def __init__(self, field: str, available: list[str]) -> None:
        self.field = field
        self.available = sorted(available)
        listing = ", ".join(self.available) if self.available else "(none)"
        super().__init__(f"unknown field '{field}'. Available fields: {listing}")


class IncompatibleOperatorError(FilterError):
    """Raised when an operator does not apply to the field's type."""

    def __init__(self, field: str, operator: str, hint: str) -> None:
        self.field = field
        self.operator = operator
        super().__init__(
            f"operator '{operator}' not supported for field '{field}'. {hint}"
        )


class InvalidRangeError(FilterError):
    """Raised when a field=min..max filter has a non-numeric or missing bound."""


class StoreUnavailableError(RuntimeError):
    """Raised when the metadata database cannot be opened or queried."""


class FetchCancelledError(StoreUnavailableError):
    """Raised when a metadata fetch is cancelled before completion."""


class SearchToolError(RuntimeError):
    """Raised when the external search tool is missing or fails."""


__all__ = [
    "FetchCancelledError",
    "FilterError",
    "FilterSyntaxError",
    "IncompatibleOperatorError",
    "InvalidRangeError",
    "SearchToolError",
    "StoreUnavailableError",
    "UnknownFieldError",
]
