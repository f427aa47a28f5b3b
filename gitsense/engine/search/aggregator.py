"""Aggregate enriched matches into a per-file summary with field histograms."""

from __future__ import annotations

from collections.abc import Sequence

from gitsense.engine.search.models import FileSummary, GrepSummary, MatchResult

# Longer (or multiline) values are treated as free text, not categories.
MAX_CATEGORICAL_LENGTH = 50


def _is_categorical(text: str) -> bool:
    return len(text) <= MAX_CATEGORICAL_LENGTH and "\n" not in text


def aggregate_matches(matches: Sequence[MatchResult], limit: int = 0) -> GrepSummary:
    """Group matches by file, count values per field, sort and truncate.

    Files are ordered by descending match count; ties keep first-appearance
    order. Totals describe every file even when ``limit`` truncates the list.
    """
    summary = GrepSummary(total_matches=len(matches))
    by_file: dict[str, FileSummary] = {}

    for match in matches:
        entry = by_file.get(match.file_path)
        if entry is None:
            entry = FileSummary(
                file_path=match.file_path,
                analyzed=match.analyzed,
                chat_id=match.chat_id,
                metadata=dict(match.metadata),
            )
            by_file[match.file_path] = entry
        entry.match_count += 1

        if not match.analyzed:
            continue
        for name, value in match.metadata.items():
            if value is None:
                continue
            text = str(value)
            if not _is_categorical(text):
                continue
            counts = summary.field_distribution.setdefault(name, {})
            counts[text] = counts.get(text, 0) + 1

    files = sorted(by_file.values(), key=lambda entry: -entry.match_count)
    summary.total_files = len(files)
    summary.analyzed_files = sum(1 for entry in files if entry.analyzed)
    summary.unanalyzed_files = summary.total_files - summary.analyzed_files

    if limit > 0 and len(files) > limit:
        files = files[:limit]
        summary.is_truncated = True
    summary.files = files
    return summary


__all__ = ["MAX_CATEGORICAL_LENGTH", "aggregate_matches"]
