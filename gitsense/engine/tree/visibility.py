"""Bottom-up visibility, pruning, and coverage stats."""

from __future__ import annotations

from gitsense.engine.tree.model import Node, TreeStats


def calculate_visibility(node: Node) -> bool:
    """Files are visible when matched; directories when any child is."""
    if not node.is_dir:
        node.visible = node.matched
        return node.visible
    any_visible = False
    for child in node.children:
        # No short-circuit: every descendant needs its flag set.
        if calculate_visibility(child):
            any_visible = True
    node.visible = any_visible
    return node.visible


def prune_tree(node: Node) -> bool:
    """Drop invisible subtrees in place; return whether *node* survives."""
    if not node.is_dir:
        return node.visible
    node.children = [child for child in node.children if prune_tree(child)]
    return bool(node.children) or node.matched


def calculate_stats(node: Node) -> TreeStats:
    total = analyzed = matched = 0
    for leaf in node.walk_files():
        total += 1
        analyzed += leaf.analyzed
        matched += leaf.matched
    return TreeStats(total_files=total, analyzed_files=analyzed, matched_files=matched)


__all__ = ["calculate_stats", "calculate_visibility", "prune_tree"]
