"""Terminal output helpers: ANSI colors and stderr error lines."""

from __future__ import annotations

import os
import sys

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}

NO_COLOR = os.environ.get("NO_COLOR") is not None


def colorize(text: str, color: str) -> str:
    if NO_COLOR or not sys.stdout.isatty():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def error(msg: str) -> None:
    """Print a red error line to stderr."""
    print(colorize(f"  {msg}", "red"), file=sys.stderr)


__all__ = ["COLORS", "NO_COLOR", "colorize", "error"]
