"""Shared fixtures: a small manifest database under a tmp .gitsense/."""

import json
import sqlite3
from pathlib import Path

import pytest

SCHEMA = """
CREATE TABLE files (
    file_path TEXT PRIMARY KEY,
    chat_id INTEGER,
    language TEXT
);
CREATE TABLE metadata_fields (
    field_id INTEGER PRIMARY KEY,
    field_ref_id TEXT,
    analyzer_id TEXT,
    field_name TEXT NOT NULL,
    field_display_name TEXT,
    field_type TEXT,
    field_description TEXT
);
CREATE TABLE file_metadata (
    file_path TEXT NOT NULL,
    field_id INTEGER NOT NULL,
    field_value TEXT,
    analysis_confidence REAL
);
"""

FIELD_TYPES = {
    "risk_level": ("string", "How risky a change to this file is"),
    "topics": ("list", "Topics the file deals with"),
    "loc": ("number", "Lines of code"),
    "purpose": ("string", "One-line purpose"),
    "layer": ("string", ""),
}

SAMPLE_FILES = {
    "src/a.go": (1, {
        "risk_level": "high",
        "topics": json.dumps(["security", "auth"]),
        "loc": "120",
        "purpose": "Handles login and session refresh",
        "layer": "core",
    }),
    "src/b.go": (2, {
        "risk_level": "low",
        "topics": json.dumps(["parsing"]),
        "loc": "40",
        "layer": "cli",
    }),
    "docs/c.md": (3, {"risk_level": "high", "purpose": "Docs"}),
    "src/pending.go": (None, {}),
}


def create_manifest(path: Path, files: dict = SAMPLE_FILES, fields: dict = FIELD_TYPES) -> Path:
    """Write a manifest database at *path* holding *files* and *fields*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        field_ids = {}
        for field_id, (name, (field_type, description)) in enumerate(fields.items(), start=1):
            conn.execute(
                "INSERT INTO metadata_fields (field_id, field_ref_id, analyzer_id, field_name, "
                "field_display_name, field_type, field_description) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (field_id, f"ref-{name}", "arch", name, name.title(), field_type, description),
            )
            field_ids[name] = field_id
        for file_path, (chat_id, values) in files.items():
            conn.execute(
                "INSERT INTO files (file_path, chat_id, language) VALUES (?, ?, ?)",
                (file_path, chat_id, "go"),
            )
            for name, value in values.items():
                conn.execute(
                    "INSERT INTO file_metadata (file_path, field_id, field_value, analysis_confidence) "
                    "VALUES (?, ?, ?, ?)",
                    (file_path, field_ids[name], value, 0.9),
                )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture()
def project_root(tmp_path, monkeypatch):
    """A project root with an `arch` manifest database, wired via GITSENSE_ROOT."""
    monkeypatch.setenv("GITSENSE_ROOT", str(tmp_path))
    monkeypatch.delenv("GITSENSE_DIR", raising=False)
    create_manifest(tmp_path / ".gitsense" / "arch.db")
    return tmp_path


@pytest.fixture()
def manifest_conn(project_root):
    from gitsense.engine.metadata.store import open_store

    conn = open_store(project_root / ".gitsense" / "arch.db")
    yield conn
    conn.close()


@pytest.fixture()
def field_types():
    from gitsense.core.enums import FieldType

    return {name: FieldType(field_type) for name, (field_type, _) in FIELD_TYPES.items()}


def find_node(node, path):
    """Return the descendant of *node* at a "/"-separated relative path, or None."""
    current = node
    for part in path.split("/"):
        if current is None:
            return None
        current = next((child for child in current.children if child.name == part), None)
    return current
