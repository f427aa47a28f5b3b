"""Open the selected manifest database and parse filters against its schema."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from gitsense.core.enums import FieldType
from gitsense.engine.filters.conditions import FilterCondition
from gitsense.engine.filters.parser import parse_filters
from gitsense.engine.metadata.store import get_field_types, open_store, resolve_database


@dataclass(frozen=True)
class StoreSession:
    name: str
    path: Path
    conn: sqlite3.Connection
    field_types: dict[str, FieldType]

    def parse(self, filter_strings: Sequence[str]) -> list[FilterCondition]:
        return parse_filters(filter_strings, self.field_types)


@contextmanager
def store_session(db_name: str, root: Path | None = None) -> Iterator[StoreSession]:
    """Resolve *db_name*, open it read-only, and load its field schema."""
    path = resolve_database(db_name, root)
    conn = open_store(path)
    try:
        yield StoreSession(
            name=db_name, path=path, conn=conn, field_types=get_field_types(conn)
        )
    finally:
        conn.close()


__all__ = ["StoreSession", "store_session"]
