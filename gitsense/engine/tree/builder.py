"""Build a directory tree from git's flat list of tracked files."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from gitsense.core.globs import matches_any
from gitsense.engine.tree.model import ROOT_NAME, Node

logger = logging.getLogger(__name__)


def _relative_to_offset(path: str, offset: str) -> str | None:
    """Path below *offset*, or None when the file lies outside it.

    Segment-aware: offset "src" owns "src/a.go" but not "srcx/a.go".
    """
    if not offset:
        return path
    prefix = offset + "/"
    if not path.startswith(prefix):
        return None
    return path[len(prefix):]


def sort_tree(node: Node) -> None:
    """Order children directories-first, then by name, at every level."""
    node.children.sort(key=lambda child: (not child.is_dir, child.name))
    for child in node.children:
        sort_tree(child)


def build_tree(
    files: Iterable[str], cwd_offset: str = "", focus: Sequence[str] = ()
) -> Node:
    """Insert every in-scope file under a synthetic root.

    Files outside ``cwd_offset`` are dropped first; ``focus`` globs then
    match against the full repository path, not the offset-relative one.
    """
    offset = cwd_offset.strip("/")
    if offset == ROOT_NAME:
        offset = ""
    root = Node(name=offset or ROOT_NAME, is_dir=True)

    # Per-directory name -> node index while inserting; sorted once at the end.
    index: dict[int, dict[str, Node]] = {id(root): {}}
    kept = 0
    for file_path in files:
        path = file_path.replace("\\", "/")
        rel_path = _relative_to_offset(path, offset)
        if not rel_path:
            continue
        if focus and not matches_any(focus, path):
            continue

        parts = [part for part in rel_path.split("/") if part]
        current = root
        for position, part in enumerate(parts):
            children = index.setdefault(id(current), {})
            child = children.get(part)
            if child is None:
                is_dir = position < len(parts) - 1
                child = Node(name=part, is_dir=is_dir)
                children[part] = child
                current.children.append(child)
            current = child
        kept += 1

    sort_tree(root)
    logger.debug("Built tree with %d file(s) under '%s'", kept, root.name)
    return root


__all__ = ["build_tree", "sort_tree"]
