"""Batched metadata lookup for a set of repository paths.

One query joins ``files``, ``file_metadata`` and ``metadata_fields`` for the
requested paths. The request list travels as a single JSON parameter, so the
statement never grows with the number of paths. System filters (analyzed
status, path globs, ``file_path`` conditions) run in SQL; paths they exclude
are absent from the result, which callers must read as "excluded".
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from gitsense.core.enums import AnalyzedFilter, canonical_analyzed_filter
from gitsense.core.errors import FetchCancelledError, StoreUnavailableError
from gitsense.engine.filters.conditions import FilterCondition, referenced_fields
from gitsense.engine.filters.sql import build_where_clause
from gitsense.engine.metadata.store import get_available_fields

logger = logging.getLogger(__name__)

# SQLite VM instructions between cancellation checks.
_PROGRESS_STEPS = 1000


@dataclass
class FileMetadata:
    chat_id: int | None
    fields: dict[str, object] = field(default_factory=dict)

    @property
    def analyzed(self) -> bool:
        return self.chat_id is not None


@dataclass(frozen=True)
class FetchResult:
    metadata: dict[str, FileMetadata]
    available_fields: list[str]


def projected_fields(
    requested: Sequence[str] | None, conditions: Iterable[FilterCondition]
) -> list[str] | None:
    """Requested display fields plus every filter field; None means all fields."""
    if requested is None:
        return None
    merged = dict.fromkeys(requested)
    merged.update(dict.fromkeys(referenced_fields(conditions)))
    return list(merged)


def _build_query(
    paths_json: str,
    analyzed: AnalyzedFilter,
    file_globs: Sequence[str],
    projection: list[str] | None,
    conditions: Sequence[FilterCondition],
    pushdown: bool,
) -> tuple[str, list]:
    args: list = []
    join_filter = ""
    if projection is not None:
        join_filter = (
            " AND fm.field_id IN (SELECT field_id FROM metadata_fields"
            " WHERE field_name IN (SELECT value FROM json_each(?)))"
        )
        args.append(json.dumps(projection))

    where, where_args = build_where_clause(
        conditions, analyzed, file_globs, include_metadata=pushdown
    )
    path_filter = "f.file_path IN (SELECT value FROM json_each(?))"
    where = f"{where} AND {path_filter}" if where else f"WHERE {path_filter}"
    args.extend(where_args)
    args.append(paths_json)

    sql = (
        "SELECT f.file_path, f.chat_id, mf.field_name, fm.field_value "
        "FROM files f "
        f"LEFT JOIN file_metadata fm ON fm.file_path = f.file_path{join_filter} "
        "LEFT JOIN metadata_fields mf ON mf.field_id = fm.field_id "
        f"{where} "
        "ORDER BY f.file_path, mf.field_name"
    )
    return sql, args


def _coerce_chat_id(raw: object) -> int | None:
    if raw is None or raw == "":
        return None
    return int(raw)


def _coerce_value(raw: object) -> object:
    if raw is None or isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


def _collect_rows(rows: Iterable[tuple], strict: bool) -> dict[str, FileMetadata]:
    result: dict[str, FileMetadata] = {}
    for file_path, raw_chat_id, field_name, field_value in rows:
        try:
            chat_id = _coerce_chat_id(raw_chat_id)
        except (TypeError, ValueError) as exc:
            if strict:
                raise StoreUnavailableError(
                    f"malformed chat_id for {file_path}: {raw_chat_id!r}"
                ) from exc
            logger.warning("Skipping %s: malformed chat_id %r", file_path, raw_chat_id)
            continue
        entry = result.setdefault(file_path, FileMetadata(chat_id=chat_id))
        if field_name is not None:
            entry.fields[field_name] = _coerce_value(field_value)
    return result


def fetch_metadata_map(
    conn: sqlite3.Connection,
    file_paths: Iterable[str],
    *,
    analyzed: AnalyzedFilter | str = AnalyzedFilter.ALL,
    file_globs: Sequence[str] = (),
    fields: Sequence[str] | None = None,
    conditions: Sequence[FilterCondition] = (),
    cancel: threading.Event | None = None,
    strict: bool = True,
    pushdown: bool = False,
) -> FetchResult:
    """Fetch metadata for *file_paths* in one batched query.

    ``fields`` projects the returned fields (None fetches all); fields named
    by ``conditions`` are always included. With ``pushdown`` the query also
    drops files lacking a filtered field; values are still evaluated in
    memory. ``strict`` turns a malformed row into an error instead of a
    logged skip. Setting ``cancel`` aborts the query with FetchCancelledError.
    """
    unique_paths = list(dict.fromkeys(file_paths))
    available = get_available_fields(conn)
    if not unique_paths:
        return FetchResult(metadata={}, available_fields=available)
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError("metadata fetch cancelled")

    sql, args = _build_query(
        json.dumps(unique_paths),
        canonical_analyzed_filter(analyzed),
        file_globs,
        projected_fields(fields, conditions),
        conditions,
        pushdown,
    )
    logger.debug("Fetching metadata for %d path(s)", len(unique_paths))

    if cancel is not None:
        conn.set_progress_handler(lambda: 1 if cancel.is_set() else 0, _PROGRESS_STEPS)
    try:
        rows = conn.execute(sql, args).fetchall()
    except sqlite3.OperationalError as exc:
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError("metadata fetch cancelled") from exc
        raise StoreUnavailableError(f"failed to query file metadata: {exc}") from exc
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"failed to query file metadata: {exc}") from exc
    finally:
        if cancel is not None:
            conn.set_progress_handler(None, 0)

    metadata = _collect_rows(rows, strict)
    logger.debug("Fetched metadata rows for %d file(s)", len(metadata))
    return FetchResult(metadata=metadata, available_fields=available)


__all__ = ["FetchResult", "FileMetadata", "fetch_metadata_map", "projected_fields"]
