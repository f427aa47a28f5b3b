"""Attach fetched metadata to tree leaves and evaluate filters per file."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from gitsense.engine.filters.conditions import (
    FieldTypeSchema,
    FilterCondition,
    metadata_conditions,
)
from gitsense.engine.filters.evaluator import check_filters
from gitsense.engine.metadata.fetcher import FileMetadata
from gitsense.engine.tree.model import ROOT_NAME, Node


def _join(base: str, name: str) -> str:
    return f"{base}/{name}" if base else name


def enrich_tree(
    root: Node,
    metadata: Mapping[str, FileMetadata],
    conditions: Sequence[FilterCondition] = (),
    field_types: FieldTypeSchema | None = None,
) -> None:
    """Set metadata and ``matched`` on every file node in place.

    Paths are rebuilt from the root name, so a root named after the cwd
    offset yields repository-relative lookups. With no conditions every
    file matches; otherwise a file absent from *metadata* never does.
    """
    base = "" if root.name == ROOT_NAME else root.name
    in_memory = metadata_conditions(conditions)
    for child in root.children:
        _enrich_node(child, base, metadata, conditions, in_memory, field_types)


def _enrich_node(
    node: Node,
    parent_path: str,
    metadata: Mapping[str, FileMetadata],
    conditions: Sequence[FilterCondition],
    in_memory: list[FilterCondition],
    field_types: FieldTypeSchema | None,
) -> None:
    full_path = _join(parent_path, node.name)
    if node.is_dir:
        for child in node.children:
            _enrich_node(child, full_path, metadata, conditions, in_memory, field_types)
        return

    meta = metadata.get(full_path)
    if meta is None:
        node.matched = not conditions
    else:
        node.chat_id = meta.chat_id
        node.analyzed = meta.analyzed
        node.metadata = dict(meta.fields)
        node.matched = not conditions or check_filters(meta.fields, in_memory, field_types)
    node.visible = node.matched


def iter_file_paths(root: Node):
    """Yield the repository path of every file node under *root*."""
    base = "" if root.name == ROOT_NAME else root.name
    stack = [(child, base) for child in reversed(root.children)]
    while stack:
        node, parent_path = stack.pop()
        full_path = _join(parent_path, node.name)
        if not node.is_dir:
            yield full_path
            continue
        stack.extend((child, full_path) for child in reversed(node.children))


__all__ = ["enrich_tree", "iter_file_paths"]
