from __future__ import annotations

"""
Aggregate Recalculation.

Re-sums an already built (and possibly hand-edited) tree after display
options change, without rebuilding the structure or re-tokenizing any
content: the size and token count stored on each file are taken as
ground truth.
"""

import logging
from typing import List, Optional, Tuple

from contexter.core.analysis.aggregator import aggregate
from contexter.domain.tree_models import TreeNode

logger = logging.getLogger(__name__)


def recalculate(roots: List[TreeNode], show_token_count: bool = True) -> Tuple[int, Optional[int]]:
    """
    Refresh the directory aggregates of every root in place.

    Structure is left untouched: no node is added, removed or moved.
    With token counting off, directory token counts become None (absent)
    rather than 0; file leaves keep their stored counts so that turning
    counting back on restores the totals without re-tokenizing.

    Args:
        roots: Top-level nodes of an existing tree.
        show_token_count: Whether directory token totals are computed.

    Returns:
        Tuple[int, Optional[int]]: Total size and total tokens (None when disabled).
    """
    total_size = 0
    total_tokens: Optional[int] = 0 if show_token_count else None

    for root in roots:
        size, tokens = aggregate(root, show_token_count, hide_empty_folders=False)
        total_size += size
        if total_tokens is not None:
            total_tokens += tokens or 0

    logger.debug(f"Recalculated {len(roots)} roots: size={total_size}, tokens={total_tokens}.")
    return total_size, total_tokens
