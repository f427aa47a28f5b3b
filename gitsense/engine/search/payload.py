"""JSON response for ``gsc grep``, shaped for agent consumption."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from datetime import datetime, timezone

from gitsense.engine.search.models import GrepSummary, MatchResult


@dataclass(frozen=True)
class QueryContext:
    pattern: str
    database: str
    mode: str
    tool_name: str
    tool_version: str
    arguments: tuple[str, ...] = ()
    duration_ms: int = 0
    file_type: str = ""
    context_lines: int = 0
    case_sensitive: bool = True
    filters: tuple[str, ...] = ()
    analyzed: str = "all"
    file_globs: tuple[str, ...] = ()
    project_root: str = ""
    repository: str = ""
    remote: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "database": self.database,
            "mode": self.mode,
            "tool": {
                "name": self.tool_name,
                "version": self.tool_version,
                "arguments": list(self.arguments),
                "total_ms": self.duration_ms,
            },
            "search_scope": {
                "file_type": self.file_type,
                "context_lines": self.context_lines,
                "case_sensitive": self.case_sensitive,
            },
            "filters": {
                "metadata": list(self.filters),
                "analyzed": self.analyzed,
                "files": list(self.file_globs),
            },
            "system": {"os": platform.system().lower(), "project_root": self.project_root},
            "repository": {"name": self.repository, "remote": self.remote},
            "timestamp": self.timestamp.isoformat(),
        }


def truncation_hint(summary: GrepSummary, limit: int) -> str:
    return (
        f"Results truncated to the top {limit} of {summary.total_files} files by match count. "
        "Use --limit 0 to list every file, or add --filter/--file to narrow the search."
    )


def build_response(
    context: QueryContext,
    summary: GrepSummary,
    matches: list[MatchResult],
    *,
    summary_only: bool,
    limit: int = 0,
) -> dict:
    """Summary mode carries the aggregate; full mode carries every match."""
    response: dict = {"context": context.to_dict()}
    if summary_only:
        response["summary"] = summary.to_dict()
        if summary.is_truncated:
            response["hint"] = truncation_hint(summary, limit)
    else:
        response["matches"] = [match.to_dict() for match in matches]
    return response


__all__ = ["QueryContext", "build_response", "truncation_hint"]
