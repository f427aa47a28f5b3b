"""Search data model: raw tool matches, enriched matches, and summaries."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SearchOptions:
    pattern: str
    context_lines: int = 0
    case_sensitive: bool = True
    file_type: str = ""


@dataclass
class RawMatch:
    file_path: str
    line_number: int
    line_text: str
    context_before: list[str] = field(default_factory=list)
    context_after: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SearchRun:
    """Matches plus provenance of the tool that produced them."""

    matches: list[RawMatch]
    tool_name: str
    tool_version: str
    arguments: list[str]
    duration_ms: int


@dataclass
class MatchResult:
    file_path: str
    line_number: int
    line_text: str
    context_before: list[str] = field(default_factory=list)
    context_after: list[str] = field(default_factory=list)
    chat_id: int | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def analyzed(self) -> bool:
        return bool(self.metadata)

    def to_dict(self) -> dict:
        data: dict = {
            "file_path": self.file_path,
            "line_number": self.line_number,
            "line_text": self.line_text,
        }
        if self.context_before:
            data["context_before"] = list(self.context_before)
        if self.context_after:
            data["context_after"] = list(self.context_after)
        if self.chat_id is not None:
            data["chat_id"] = self.chat_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class FileSummary:
    file_path: str
    match_count: int = 0
    analyzed: bool = False
    chat_id: int | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict = {
            "file_path": self.file_path,
            "match_count": self.match_count,
            "analyzed": self.analyzed,
        }
        if self.chat_id is not None:
            data["chat_id"] = self.chat_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class GrepSummary:
    total_matches: int = 0
    total_files: int = 0
    analyzed_files: int = 0
    unanalyzed_files: int = 0
    field_distribution: dict[str, dict[str, int]] = field(default_factory=dict)
    files: list[FileSummary] = field(default_factory=list)
    is_truncated: bool = False

    def to_dict(self) -> dict:
        return {
            "total_matches": self.total_matches,
            "total_files": self.total_files,
            "analyzed_files": self.analyzed_files,
            "unanalyzed_files": self.unanalyzed_files,
            "field_distribution": {
                name: dict(counts) for name, counts in self.field_distribution.items()
            },
            "files": [summary.to_dict() for summary in self.files],
            "is_truncated": self.is_truncated,
        }


__all__ = [
    "FileSummary",
    "GrepSummary",
    "MatchResult",
    "RawMatch",
    "SearchOptions",
    "SearchRun",
]
