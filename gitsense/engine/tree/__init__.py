"""Metadata-annotated repository tree: build, enrich, propagate, prune."""

from gitsense.engine.tree.builder import build_tree, sort_tree
from gitsense.engine.tree.enrich import enrich_tree, iter_file_paths
from gitsense.engine.tree.model import ROOT_NAME, Node, TreeStats
from gitsense.engine.tree.visibility import calculate_stats, calculate_visibility, prune_tree

__all__ = [
    "ROOT_NAME",
    "Node",
    "TreeStats",
    "build_tree",
    "calculate_stats",
    "calculate_visibility",
    "enrich_tree",
    "iter_file_paths",
    "prune_tree",
    "sort_tree",
]
