from __future__ import annotations

"""
Tree Renderer.

Converts processed TreeNode lists into visual ASCII lines annotated
with sizes and token counts.
"""

from typing import List, Optional, Tuple

from contexter.core.processing.paths import format_file_size
from contexter.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(
        roots: List[TreeNode],
        show_size: bool = True,
        show_tokens: bool = True,
) -> List[str]:
    """
    Render a tree as connector lines, keeping the existing node order.

    Args:
        roots: Top-level nodes.
        show_size: Append the human-readable size.
        show_tokens: Append the token count when present.

    Returns:
        List[str]: One line per node.
    """
    lines: List[str] = []
    _render_level(roots, lines, "", show_size, show_tokens)
    return lines


def _render_level(
        nodes: List[TreeNode],
        lines: List[str],
        prefix: str,
        show_size: bool,
        show_tokens: bool,
) -> None:
    """Append one line per node using ├── / └── connectors, pre-order."""
    stack: List[Tuple[TreeNode, str, bool]] = []
    _push_level(stack, nodes, prefix)

    while stack:
        node, node_prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "

        label = f"{node.name}/" if node.is_dir else node.name
        annotation = _annotation(node, show_size, show_tokens)
        lines.append(f"{node_prefix}{connector}{label}{annotation}")

        if node.is_dir:
            _push_level(stack, node.children, node_prefix + ("    " if is_last else "│   "))


def _push_level(stack: List[Tuple[TreeNode, str, bool]], nodes: List[TreeNode], prefix: str) -> None:
    """Push siblings in reverse so the first one is rendered next."""
    last = len(nodes) - 1
    for i in range(last, -1, -1):
        stack.append((nodes[i], prefix, i == last))


def _annotation(node: TreeNode, show_size: bool, show_tokens: bool) -> str:
    parts: List[str] = []
    if show_size and node.size is not None:
        parts.append(format_file_size(node.size))
    tokens: Optional[int] = node.token_count
    if show_tokens and tokens is not None:
        parts.append(f"{tokens:,} tokens")
    return f" ({', '.join(parts)})" if parts else ""
