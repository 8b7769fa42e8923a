from __future__ import annotations

"""
contexter: filtered, token-annotated directory trees for LLM prompts.
"""

from contexter.core.pipeline.engine import (
    filter_files,
    merge_to_markdown,
    process_files,
    recalculate_counts,
)
from contexter.domain.tree_models import (
    FileContent,
    FileMetadata,
    FilterResult,
    ProcessingResult,
    TreeNode,
)

__version__ = "1.0.0"

__all__ = [
    "FileContent",
    "FileMetadata",
    "FilterResult",
    "ProcessingResult",
    "TreeNode",
    "filter_files",
    "merge_to_markdown",
    "process_files",
    "recalculate_counts",
]
