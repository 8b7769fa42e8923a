from __future__ import annotations

"""
Tree Aggregation and Ordering.

Post-order fold that computes every directory's size and token total
from its children, optionally pruning directories left without content,
followed by the deterministic display ordering: directories first, then
case-insensitive name, ties kept in their existing order.
"""

from typing import List, Optional, Tuple

from contexter.domain.tree_models import TreeNode

Totals = Tuple[int, Optional[int]]


# -----------------------------------------------------------------------------
# AGGREGATION
# -----------------------------------------------------------------------------

def aggregate(node: TreeNode, show_token_count: bool = True, hide_empty_folders: bool = False) -> Totals:
    """
    Recompute the aggregate fields of a subtree.

    A file returns its stored values unchanged. A directory folds its
    children first, drops empty child directories when requested, and
    only then sums the surviving children. Running it twice on an
    unchanged tree gives identical results.

    The walk uses an explicit stack, so nesting depth is not bounded by
    the interpreter's recursion limit.

    Args:
        node: Subtree root, mutated in place.
        show_token_count: Sum token counts; when False directory counts become None.
        hide_empty_folders: Remove child directories that end up with no children.

    Returns:
        Totals: (size, token_count) of the subtree.
    """
    if not node.is_dir:
        return node.size or 0, node.token_count

    stack: List[Tuple[TreeNode, bool]] = [(node, False)]
    while stack:
        current, children_done = stack.pop()
        if not children_done:
            stack.append((current, True))
            stack.extend((child, False) for child in current.children if child.is_dir)
            continue

        if hide_empty_folders:
            current.children = [child for child in current.children if not _is_empty_dir(child)]
        _fold_children(current, show_token_count)

    return node.size or 0, node.token_count


def _fold_children(node: TreeNode, show_token_count: bool) -> None:
    """Sum the (already aggregated) children of a directory into it."""
    node.size = sum(child.size or 0 for child in node.children)
    node.token_count = None
    if show_token_count:
        node.token_count = sum(child.token_count or 0 for child in node.children)


def aggregate_roots(
        roots: List[TreeNode],
        show_token_count: bool = True,
        hide_empty_folders: bool = False,
) -> Tuple[List[TreeNode], int, Optional[int]]:
    """
    Aggregate every root and prune empty top-level directories.

    Returns:
        Tuple[List[TreeNode], int, Optional[int]]: Surviving roots, total size,
                                                   total tokens (None when disabled).
    """
    total_size = 0
    total_tokens: Optional[int] = 0 if show_token_count else None
    kept: List[TreeNode] = []

    for root in roots:
        size, tokens = aggregate(root, show_token_count, hide_empty_folders)
        if hide_empty_folders and _is_empty_dir(root):
            continue
        kept.append(root)
        total_size += size
        if total_tokens is not None:
            total_tokens += tokens or 0

    return kept, total_size, total_tokens


def _is_empty_dir(node: TreeNode) -> bool:
    return node.is_dir and not node.children


# -----------------------------------------------------------------------------
# ORDERING
# -----------------------------------------------------------------------------

def _sort_key(node: TreeNode) -> Tuple[bool, str]:
    return not node.is_dir, node.name.lower()


def order_nodes(nodes: List[TreeNode]) -> None:
    """
    Sort a node list and every descendant list in place.

    Directories come before files; otherwise names compare
    case-insensitively. The sort is stable.
    """
    pending: List[List[TreeNode]] = [nodes]
    while pending:
        level = pending.pop()
        level.sort(key=_sort_key)
        pending.extend(node.children for node in level if node.is_dir)
