"""Search history recorded in .gitsense/stats.db."""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from gitsense.core.paths import STATS_DB_NAME, data_dir

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS search_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    pattern TEXT NOT NULL,
    tool_name TEXT,
    tool_version TEXT,
    duration_ms INTEGER,
    total_matches INTEGER,
    total_files INTEGER,
    analyzed_files INTEGER,
    filters_used TEXT,
    database_name TEXT,
    case_sensitive INTEGER,
    file_filters TEXT,
    analyzed_filter TEXT
);
CREATE INDEX IF NOT EXISTS idx_search_history_timestamp ON search_history(timestamp);
CREATE INDEX IF NOT EXISTS idx_search_history_pattern ON search_history(pattern);
"""


@dataclass(frozen=True)
class SearchRecord:
    pattern: str
    tool_name: str
    tool_version: str
    duration_ms: int
    total_matches: int
    total_files: int
    analyzed_files: int
    database_name: str
    case_sensitive: bool
    filters: tuple[str, ...] = ()
    file_filters: tuple[str, ...] = ()
    analyzed_filter: str = "all"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def stats_path(root: Path | None = None) -> Path:
    return data_dir(root) / STATS_DB_NAME


def record_search(record: SearchRecord, path: Path | None = None) -> None:
    """Append one search to the history table, creating it on first use."""
    target = path or stats_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(target)
    try:
        with conn:
            conn.executescript(_SCHEMA)
            conn.execute(
                "INSERT INTO search_history (timestamp, pattern, tool_name, tool_version, "
                "duration_ms, total_matches, total_files, analyzed_files, filters_used, "
                "database_name, case_sensitive, file_filters, analyzed_filter) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.timestamp.isoformat(),
                    record.pattern,
                    record.tool_name,
                    record.tool_version,
                    record.duration_ms,
                    record.total_matches,
                    record.total_files,
                    record.analyzed_files,
                    json.dumps(list(record.filters)),
                    record.database_name,
                    int(record.case_sensitive),
                    json.dumps(list(record.file_filters)),
                    record.analyzed_filter,
                ),
            )
    finally:
        conn.close()
    logger.debug("Recorded search '%s' in %s", record.pattern, target)


__all__ = ["SearchRecord", "record_search", "stats_path"]
