"""Project root and .gitsense data-directory resolution."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

DEFAULT_DATA_DIR = ".gitsense"
DB_EXTENSION = ".db"
STATS_DB_NAME = "stats.db"


def get_project_root() -> Path:
    """Return the active project root from $GITSENSE_ROOT, falling back to cwd.

    Read on every call so tests can point it at a tmp directory with
    ``monkeypatch.setenv``.
    """
    return Path(os.environ.get("GITSENSE_ROOT", Path.cwd())).resolve()


def data_dir(root: Path | None = None) -> Path:
    """Return the .gitsense directory (name overridable via $GITSENSE_DIR)."""
    base = root if root is not None else get_project_root()
    return base / os.environ.get("GITSENSE_DIR", DEFAULT_DATA_DIR)


def database_path(db_name: str, root: Path | None = None) -> Path:
    """Map a manifest database name to its SQLite file."""
    name = db_name if db_name.endswith(DB_EXTENSION) else db_name + DB_EXTENSION
    return data_dir(root) / name


def safe_write_text(filepath: str | Path, content: str) -> None:
    """Atomically write text to a file using temp+rename."""
    p = Path(filepath)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=p.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp, str(p))
    except OSError:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


__all__ = [
    "DB_EXTENSION",
    "DEFAULT_DATA_DIR",
    "STATS_DB_NAME",
    "data_dir",
    "database_path",
    "get_project_root",
    "safe_write_text",
]
