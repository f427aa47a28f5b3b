"""Repository context for commands, tolerant of running outside git."""

from __future__ import annotations

import logging

from gitsense.app.commands.helpers.runtime import CommandRuntime
from gitsense.core.git import GitError, RepoContext, get_repo_context

logger = logging.getLogger(__name__)


def repo_context_or_root(runtime: CommandRuntime) -> RepoContext:
    """Git root and cwd offset, or the project root when git is unavailable."""
    try:
        return get_repo_context()
    except GitError as exc:
        logger.debug("Falling back to project root %s: %s", runtime.root, exc)
        return RepoContext(root=runtime.root, cwd_offset="")


__all__ = ["repo_context_or_root"]
