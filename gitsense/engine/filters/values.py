"""Typed view of raw metadata values.

The store keeps every value as text; list fields hold a JSON array literal
(``'["security", "auth"]'``). ``resolve_value`` decodes a raw value once into
``Scalar``, ``ListValue`` or ``Absent`` so comparisons branch on the type
instead of re-parsing per operator.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from gitsense.core.enums import FieldType


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class ListValue:
    items: tuple[str, ...]


@dataclass(frozen=True)
class Absent:
    pass


ABSENT = Absent()
MetadataValue = Scalar | ListValue | Absent


def _element_text(element: object) -> str:
    if isinstance(element, str):
        return element
    return json.dumps(element)


def _decode_json_array(text: str) -> tuple[str, ...] | None:
    if not text.lstrip().startswith("["):
        return None
    try:
        decoded = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(decoded, list):
        return None
    return tuple(_element_text(element) for element in decoded)


def resolve_value(raw: object, field_type: FieldType | None = None) -> MetadataValue:
    """Decode a stored value, using the declared field type when known.

    JSON array text always becomes a list. A ``list`` field that is not JSON
    (legacy comma-separated text) is split on commas.
    """
    if raw is None:
        return ABSENT
    if isinstance(raw, (list, tuple)):
        return ListValue(tuple(_element_text(element) for element in raw))

    text = str(raw)
    items = _decode_json_array(text)
    if items is not None:
        return ListValue(items)
    if field_type == FieldType.LIST:
        parts = tuple(part.strip() for part in text.split(",") if part.strip())
        return ListValue(parts)
    return Scalar(text)


def display_text(raw: object) -> str:
    """Render a raw value for display: lists as comma-joined items."""
    value = resolve_value(raw)
    if isinstance(value, ListValue):
        return ", ".join(value.items)
    if isinstance(value, Scalar):
        return value.text
    return ""


__all__ = [
    "ABSENT",
    "Absent",
    "ListValue",
    "MetadataValue",
    "Scalar",
    "display_text",
    "resolve_value",
]
