"""Thin git adapter: repository root, cwd offset, and tracked files."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when git is unavailable or the cwd is not inside a repository."""


@dataclass(frozen=True)
class RepoContext:
    root: Path
    cwd_offset: str  # repo-relative, forward slashes; "" at the repo root


def _run_git(args: list[str], cwd: Path) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=60,
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not in PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {' '.join(args)} timed out") from exc
    if result.returncode != 0:
        raise GitError(result.stderr.strip() or f"git {' '.join(args)} failed")
    return result.stdout


def get_repo_context(cwd: Path | None = None) -> RepoContext:
    """Return the repository root and the cwd's offset inside it."""
    start = (cwd or Path.cwd()).resolve()
    root = Path(_run_git(["rev-parse", "--show-toplevel"], start).strip()).resolve()
    offset = os.path.relpath(start, root).replace("\\", "/")
    if offset == ".":
        offset = ""
    return RepoContext(root=root, cwd_offset=offset)


def get_tracked_files(root: Path) -> list[str]:
    """Return repo-relative paths of all files tracked by git."""
    output = _run_git(["ls-files", "-z"], root)
    files = [path for path in output.split("\0") if path]
    logger.debug("git ls-files returned %d paths", len(files))
    return files


def get_remote_url(root: Path, remote: str = "origin") -> str:
    """Return the URL of *remote*, or "" when it is not configured."""
    try:
        return _run_git(["config", "--get", f"remote.{remote}.url"], root).strip()
    except GitError as exc:
        logger.debug("No %s remote: %s", remote, exc)
        return ""


__all__ = [
    "GitError",
    "RepoContext",
    "get_remote_url",
    "get_repo_context",
    "get_tracked_files",
]
