"""Thin adapter around ripgrep's ``--json`` output.

Context lines between two matches in the same file serve as both the
earlier match's after-context and the later match's before-context.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import time
from collections.abc import Iterable
from pathlib import Path

from gitsense.core.errors import SearchToolError
from gitsense.engine.search.models import RawMatch, SearchOptions, SearchRun

logger = logging.getLogger(__name__)

RG_BINARY = "rg"
RG_INSTALL_HINT = "https://github.com/BurntSushi/ripgrep"
SEARCH_TIMEOUT_SECONDS = 300


def build_args(options: SearchOptions) -> list[str]:
    args = ["--json", "--no-heading"]
    if options.context_lines > 0:
        args.append(f"-C{options.context_lines}")
    if not options.case_sensitive:
        args.append("--smart-case")
    if options.file_type:
        args.append(f"--type={options.file_type}")
    # "--" keeps patterns that start with "-" from reading as flags.
    args.extend(["--", options.pattern])
    return args


def _text_of(node: object) -> str:
    """Decode ripgrep's {"text": ...} / {"bytes": ...} wrapper."""
    if not isinstance(node, dict):
        return ""
    text = node.get("text")
    if isinstance(text, str):
        return text
    return ""


def _normalize_path(path: str) -> str:
    path = path.replace("\\", "/")
    return path[2:] if path.startswith("./") else path


def parse_json_output(lines: Iterable[str]) -> list[RawMatch]:
    """Turn ripgrep JSON lines into matches with their context attached."""
    matches: list[RawMatch] = []
    pending: list[str] = []
    last: RawMatch | None = None

    for line in lines:
        if not line.strip():
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Failed to parse ripgrep JSON line: %s", exc)
            continue
        kind = message.get("type")
        data = message.get("data") or {}

        if kind == "begin":
            pending = []
            last = None
        elif kind == "context":
            pending.append(_text_of(data.get("lines")).rstrip("\r\n"))
        elif kind == "match":
            if last is not None:
                last.context_after = list(pending)
            match = RawMatch(
                file_path=_normalize_path(_text_of(data.get("path"))),
                line_number=int(data.get("line_number") or 0),
                line_text=_text_of(data.get("lines")).rstrip("\r\n"),
                context_before=list(pending),
            )
            matches.append(match)
            last = match
            pending = []
        elif kind == "end":
            if last is not None and pending:
                last.context_after = list(pending)
            pending = []
            last = None
    return matches


def _tool_version() -> str:
    try:
        result = subprocess.run(
            [RG_BINARY, "--version"], capture_output=True, text=True, timeout=10
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Could not read ripgrep version: %s", exc)
        return "unknown"
    first = result.stdout.splitlines()[0] if result.stdout else ""
    parts = first.split()
    return parts[1] if len(parts) > 1 else "unknown"


class RipgrepEngine:
    """Run ripgrep in *cwd* and return matches with repo-relative paths."""

    name = "ripgrep"

    def __init__(self, binary: str = RG_BINARY) -> None:
        self.binary = binary

    def search(
        self, options: SearchOptions, cwd: Path, path_prefix: str = ""
    ) -> SearchRun:
        if shutil.which(self.binary) is None:
            raise SearchToolError(
                f"ripgrep is not installed or not in PATH. Install it: {RG_INSTALL_HINT}"
            )

        args = build_args(options)
        logger.debug("Executing ripgrep: %s", " ".join(args))
        started = time.monotonic()
        try:
            result = subprocess.run(
                [self.binary, *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=SEARCH_TIMEOUT_SECONDS,
            )
        except subprocess.TimeoutExpired as exc:
            raise SearchToolError(
                f"ripgrep timed out after {SEARCH_TIMEOUT_SECONDS}s"
            ) from exc
        except OSError as exc:
            raise SearchToolError(f"failed to start ripgrep: {exc}") from exc
        duration_ms = int((time.monotonic() - started) * 1000)

        # Exit code 1 means "no matches".
        if result.returncode == 1:
            matches: list[RawMatch] = []
        elif result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise SearchToolError(f"ripgrep execution failed: {detail}")
        else:
            matches = parse_json_output(result.stdout.splitlines())

        if path_prefix:
            prefix = path_prefix.rstrip("/") + "/"
            for match in matches:
                match.file_path = prefix + match.file_path
        logger.debug("ripgrep returned %d match(es) in %dms", len(matches), duration_ms)
        return SearchRun(
            matches=matches,
            tool_name=self.name,
            tool_version=_tool_version(),
            arguments=args,
            duration_ms=duration_ms,
        )


__all__ = ["RipgrepEngine", "build_args", "parse_json_output"]
