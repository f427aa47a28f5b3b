"""Read-only access to manifest databases under .gitsense/."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from gitsense.core.enums import FieldType, canonical_field_type
from gitsense.core.errors import StoreUnavailableError, UnknownFieldError
from gitsense.core.paths import DB_EXTENSION, STATS_DB_NAME, data_dir, database_path
from gitsense.engine.filters.values import ListValue, Scalar, resolve_value

logger = logging.getLogger(__name__)


def list_databases(root: Path | None = None) -> list[str]:
    """Names of the manifest databases in the data directory, sorted."""
    directory = data_dir(root)
    if not directory.is_dir():
        return []
    return sorted(
        path.name[: -len(DB_EXTENSION)]
        for path in directory.glob(f"*{DB_EXTENSION}")
        if path.name != STATS_DB_NAME
    )


def resolve_database(db_name: str, root: Path | None = None) -> Path:
    """Map a database name to an existing SQLite file or raise."""
    path = database_path(db_name, root)
    if not path.is_file():
        available = list_databases(root)
        listing = ", ".join(available) if available else "(none)"
        raise StoreUnavailableError(
            f"database '{db_name}' not found at {path}. Available databases: {listing}"
        )
    return path


def open_store(db_path: Path) -> sqlite3.Connection:
    """Open a manifest database read-only."""
    if not db_path.is_file():
        raise StoreUnavailableError(f"database not found: {db_path}")
    try:
        conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to open database {db_path}: {exc}") from exc
    logger.debug("Opened manifest database %s", db_path)
    return conn


def get_field_types(conn: sqlite3.Connection) -> dict[str, FieldType]:
    """Field name -> declared type for every field the store defines."""
    try:
        rows = conn.execute(
            "SELECT field_name, field_type FROM metadata_fields ORDER BY field_name"
        ).fetchall()
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to read field schema: {exc}") from exc
    schema: dict[str, FieldType] = {}
    for name, field_type in rows:
        # Analyzers may redeclare a field; the first declaration wins.
        schema.setdefault(name, canonical_field_type(field_type))
    return schema


def get_available_fields(conn: sqlite3.Connection) -> list[str]:
    try:
        rows = conn.execute(
            "SELECT DISTINCT field_name FROM metadata_fields ORDER BY field_name"
        ).fetchall()
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to list fields: {exc}") from exc
    return [row[0] for row in rows]


def describe_fields(conn: sqlite3.Connection) -> list[dict[str, str]]:
    """Field catalog rows for discovery output (name, type, description)."""
    try:
        rows = conn.execute(
            "SELECT field_name, field_type, COALESCE(field_description, '') "
            "FROM metadata_fields ORDER BY field_name"
        ).fetchall()
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to list fields: {exc}") from exc
    seen: dict[str, dict[str, str]] = {}
    for name, field_type, description in rows:
        seen.setdefault(
            name,
            {
                "name": name,
                "type": str(canonical_field_type(field_type)),
                "description": description,
            },
        )
    return list(seen.values())


def list_field_values(conn: sqlite3.Connection, field_name: str) -> list[tuple[str, int]]:
    """Distinct values of *field_name* with the number of files holding each.

    List values count once per element, so a file tagged ``["auth", "api"]``
    adds to both. Ordered by count, most common first.
    """
    field_types = get_field_types(conn)
    if field_name not in field_types:
        raise UnknownFieldError(field_name, list(field_types))
    try:
        rows = conn.execute(
            "SELECT fm.field_value, COUNT(*) FROM file_metadata fm "
            "JOIN metadata_fields mf ON mf.field_id = fm.field_id "
            "WHERE mf.field_name = ? AND fm.field_value IS NOT NULL "
            "GROUP BY fm.field_value",
            (field_name,),
        ).fetchall()
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to list values of {field_name}: {exc}") from exc

    counts: dict[str, int] = {}
    for raw, count in rows:
        value = resolve_value(raw, field_types[field_name])
        if isinstance(value, ListValue):
            for item in value.items:
                counts[item] = counts.get(item, 0) + count
        elif isinstance(value, Scalar):
            counts[value.text] = counts.get(value.text, 0) + count
    return sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))


__all__ = [
    "describe_fields",
    "get_available_fields",
    "get_field_types",
    "list_databases",
    "list_field_values",
    "open_store",
    "resolve_database",
]
