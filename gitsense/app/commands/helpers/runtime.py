"""Runtime context helpers for command handlers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from gitsense.core.config import config_path, load_config
from gitsense.core.git import GitError, get_repo_context
from gitsense.core.paths import get_project_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandRuntime:
    """Explicit runtime dependencies shared by command handlers."""

    config: dict
    root: Path  # holds the .gitsense data directory


def data_root() -> Path:
    """$GITSENSE_ROOT if set, else the enclosing git repository, else cwd."""
    if os.environ.get("GITSENSE_ROOT"):
        return get_project_root()
    try:
        return get_repo_context().root
    except GitError as exc:
        logger.debug("Not inside a git repository: %s", exc)
        return get_project_root()


def command_runtime(args) -> CommandRuntime:
    """Return runtime context from explicit args.runtime or construct one."""
    runtime = getattr(args, "runtime", None)
    if isinstance(runtime, CommandRuntime):
        return runtime
    root = data_root()
    return CommandRuntime(config=load_config(config_path(root)), root=root)


__all__ = ["CommandRuntime", "command_runtime", "data_root"]
