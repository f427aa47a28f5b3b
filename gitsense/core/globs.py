"""Path glob matching for focus patterns, plus SQL LIKE translation.

Matching follows doublestar rules through ``wcmatch``: ``*`` and ``?`` never
cross a ``/``, a whole-segment ``**`` spans zero or more directories (so
``**/*.go`` matches ``main.go`` as well as ``cmd/gsc/main.go``), and
``{a,b}`` alternates. Dotfiles are not special. Paths use forward slashes.
"""

from __future__ import annotations

from collections.abc import Sequence

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB | glob.FORCEUNIX


def glob_match(pattern: str, path: str) -> bool:
    """Return True when *path* matches *pattern* in full."""
    return glob.globmatch(path.replace("\\", "/"), pattern, flags=GLOB_FLAGS)


def matches_any(patterns: Sequence[str], path: str) -> bool:
    if not patterns:
        return False
    return glob.globmatch(path.replace("\\", "/"), list(patterns), flags=GLOB_FLAGS)


def glob_to_like(pattern: str) -> str:
    """Translate a path glob into a SQL LIKE pattern ("internal/*" -> "internal/%")."""
    return pattern.replace("*", "%")


__all__ = ["GLOB_FLAGS", "glob_match", "glob_to_like", "matches_any"]
