"""Parameterised SQL WHERE construction for metadata and system filters.

System filters (analyzed status, path globs, ``file_path`` conditions) are
exact. Metadata conditions only become field-presence checks: stored text
is JSON-escaped and SQLite numeric casts disagree with ``float()``, so value
comparisons stay with the in-memory evaluator. A file missing the field
fails every operator except ``!exists``, which is pushed exactly.
"""

from __future__ import annotations

from collections.abc import Sequence

from gitsense.core.enums import AnalyzedFilter, Operator
from gitsense.core.globs import glob_to_like
from gitsense.engine.filters.conditions import FilterCondition

_FIELD_ROWS = (
    "SELECT 1 FROM file_metadata fm2 "
    "JOIN metadata_fields mf2 ON mf2.field_id = fm2.field_id "
    "WHERE fm2.file_path = {path} AND mf2.field_name = ?"
)


def build_condition_sql(
    cond: FilterCondition, *, path_column: str = "f.file_path"
) -> tuple[str, list]:
    """SQL for one condition relative to the row's file path column."""
    if cond.is_system:
        return build_file_condition_sql(cond, path_column=path_column)

    rows = _FIELD_ROWS.format(path=path_column)
    if cond.operator == Operator.NOT_EXISTS:
        return f"NOT EXISTS ({rows})", [cond.field]
    return f"EXISTS ({rows})", [cond.field]


def build_file_condition_sql(
    cond: FilterCondition, *, path_column: str = "f.file_path"
) -> tuple[str, list]:
    op = cond.operator
    if op == Operator.EQ:
        return f"{path_column} = ?", [cond.value]
    if op == Operator.NE:
        return f"{path_column} != ?", [cond.value]
    if op == Operator.CONTAINS:
        return f"{path_column} LIKE ?", [f"%{cond.value}%"]
    if op == Operator.NOT_CONTAINS:
        return f"{path_column} NOT LIKE ?", [f"%{cond.value}%"]
    raise ValueError(f"unsupported operator for file_path: {op}")


def build_where_clause(
    conditions: Sequence[FilterCondition],
    analyzed: AnalyzedFilter | str = AnalyzedFilter.ALL,
    file_globs: Sequence[str] = (),
    *,
    path_column: str = "f.file_path",
    chat_id_column: str = "f.chat_id",
    include_metadata: bool = True,
) -> tuple[str, list]:
    """Combine filters into "WHERE a AND b ..." (empty string when none apply).

    Path globs are OR-combined with each other and ANDed with the rest.
    """
    parts: list[str] = []
    args: list = []

    for cond in conditions:
        if not cond.is_system and not include_metadata:
            continue
        sql, cond_args = build_condition_sql(cond, path_column=path_column)
        parts.append(sql)
        args.extend(cond_args)

    if analyzed == AnalyzedFilter.TRUE:
        parts.append(f"{chat_id_column} IS NOT NULL")
    elif analyzed == AnalyzedFilter.FALSE:
        parts.append(f"{chat_id_column} IS NULL")

    if file_globs:
        parts.append("(" + " OR ".join([f"{path_column} LIKE ?"] * len(file_globs)) + ")")
        args.extend(glob_to_like(pattern) for pattern in file_globs)

    if not parts:
        return "", args
    return "WHERE " + " AND ".join(parts), args


__all__ = ["build_condition_sql", "build_file_condition_sql", "build_where_clause"]
