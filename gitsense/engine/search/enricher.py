"""Attach fetched metadata to raw matches and apply metadata filters."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from gitsense.engine.filters.conditions import (
    FieldTypeSchema,
    FilterCondition,
    metadata_conditions,
)
from gitsense.engine.filters.evaluator import check_filters
from gitsense.engine.metadata.fetcher import FileMetadata
from gitsense.engine.search.models import MatchResult, RawMatch

logger = logging.getLogger(__name__)


def unique_paths(matches: Sequence[RawMatch]) -> list[str]:
    """Distinct match paths in first-seen order."""
    return list(dict.fromkeys(match.file_path for match in matches))


def enrich_matches(
    matches: Sequence[RawMatch],
    metadata: Mapping[str, FileMetadata],
    conditions: Sequence[FilterCondition] = (),
    field_types: FieldTypeSchema | None = None,
) -> list[MatchResult]:
    """Return the matches whose file passed the fetch and every filter.

    A path missing from *metadata* was excluded by the system filters.
    """
    in_memory = metadata_conditions(conditions)
    verdicts: dict[str, bool] = {}
    enriched: list[MatchResult] = []

    for match in matches:
        meta = metadata.get(match.file_path)
        if meta is None:
            continue
        keep = verdicts.get(match.file_path)
        if keep is None:
            keep = check_filters(meta.fields, in_memory, field_types)
            verdicts[match.file_path] = keep
        if not keep:
            continue
        enriched.append(
            MatchResult(
                file_path=match.file_path,
                line_number=match.line_number,
                line_text=match.line_text,
                context_before=list(match.context_before),
                context_after=list(match.context_after),
                chat_id=meta.chat_id,
                metadata=dict(meta.fields),
            )
        )

    logger.debug("Enriched %d match(es) from %d raw", len(enriched), len(matches))
    return enriched


__all__ = ["enrich_matches", "unique_paths"]
