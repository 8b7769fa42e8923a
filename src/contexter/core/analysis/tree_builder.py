from __future__ import annotations

"""
Directory Tree Builder.

Synthesizes the minimal directory tree implied by a flat batch of file
paths. Nodes are first collected in a path-keyed map that owns them;
every implied ancestor directory is created on the way. The map is then
drained longest-path-first, each node being removed exactly once and
attached to its parent, so children are always placed before their
parent is itself reparented. Nodes without a parent become roots.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from contexter.core.processing.paths import (
    ancestor_paths,
    extract_file_name,
    normalize_path,
    parent_path,
)
from contexter.domain.errors import PathCollisionError, PathError
from contexter.domain.tree_models import FileContent, TreeNode

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str], int]


@dataclass
class BuildOutcome:
    """
    Structure and running totals produced by the builder.

    Totals only cover file leaves that ended up in the tree.
    """
    roots: List[TreeNode] = field(default_factory=list)
    total_files: int = 0
    total_size: int = 0
    total_tokens: int = 0
    skipped: List[PathError] = field(default_factory=list)


class TreeBuilder:
    """
    Builds an unordered, unaggregated tree from file contents.

    Args:
        count_tokens: Token counter, or None to leave token counts absent.
        collision_policy: 'last' keeps the later of two files with the same
                          normalized path, 'first' keeps the earlier one,
                          'error' raises PathCollisionError.
    """

    def __init__(self, count_tokens: Optional[TokenCounter] = None, collision_policy: str = "last") -> None:
        self._count_tokens = count_tokens
        self._collision_policy = collision_policy
        self._nodes: Dict[str, TreeNode] = {}
        self._outcome = BuildOutcome()

    def build(self, files: Iterable[FileContent]) -> BuildOutcome:
        """
        Insert every file, then reparent the collected nodes.

        Raises:
            PathCollisionError: Only under the 'error' collision policy.
        """
        for item in files:
            try:
                if item.path.endswith("/") or item.path.endswith("\\"):
                    self._insert_directory(item.path)
                else:
                    self._insert_file(item)
            except PathCollisionError:
                raise
            except PathError as e:
                logger.warning(str(e))
                self._outcome.skipped.append(e)

        self._outcome.roots = self._reparent()
        return self._outcome

    # -------------------------------------------------------------------------
    # INSERTION
    # -------------------------------------------------------------------------

    def _insert_file(self, item: FileContent) -> None:
        path = normalize_path(item.path)
        if not path:
            raise PathError(item.path, "path is empty after normalization")

        self._check_ancestors(path, item.path)

        existing = self._nodes.get(path)
        if existing is not None:
            if existing.is_dir:
                raise PathError(item.path, f"'{path}' is already a directory")
            if self._collision_policy == "error":
                raise PathCollisionError(item.path, f"duplicate normalized path '{path}'")
            if self._collision_policy == "first":
                logger.warning(f"Duplicate path '{path}' from {item.path!r}; keeping the first file.")
                return
            logger.warning(f"Duplicate path '{path}' from {item.path!r}; replacing the earlier file.")
            self._forget_leaf(existing)

        size = len(item.content.encode("utf-8"))
        tokens = self._count_tokens(item.content) if self._count_tokens is not None else None

        self._nodes[path] = TreeNode(
            path=path,
            name=extract_file_name(path),
            is_dir=False,
            size=size,
            token_count=tokens,
        )
        self._outcome.total_files += 1
        self._outcome.total_size += size
        self._outcome.total_tokens += tokens or 0

        self._ensure_ancestors(path)

    def _insert_directory(self, raw_path: str) -> None:
        path = normalize_path(raw_path)
        if not path:
            raise PathError(raw_path, "path is empty after normalization")

        self._check_ancestors(path, raw_path)

        existing = self._nodes.get(path)
        if existing is not None and not existing.is_dir:
            raise PathError(raw_path, f"'{path}' is already a file")

        self._ensure_ancestors(path)
        self._nodes.setdefault(path, self._new_directory(path))

    def _check_ancestors(self, path: str, raw_path: str) -> None:
        for ancestor in ancestor_paths(path):
            node = self._nodes.get(ancestor)
            if node is not None and not node.is_dir:
                raise PathError(raw_path, f"ancestor '{ancestor}' is a file")

    def _ensure_ancestors(self, path: str) -> None:
        current = parent_path(path)
        while current:
            if current in self._nodes:
                break
            self._nodes[current] = self._new_directory(current)
            current = parent_path(current)

    def _new_directory(self, path: str) -> TreeNode:
        return TreeNode(
            path=path,
            name=extract_file_name(path),
            is_dir=True,
            size=0,
            token_count=0 if self._count_tokens is not None else None,
        )

    def _forget_leaf(self, node: TreeNode) -> None:
        self._outcome.total_files -= 1
        self._outcome.total_size -= node.size or 0
        self._outcome.total_tokens -= node.token_count or 0

    # -------------------------------------------------------------------------
    # REPARENTING
    # -------------------------------------------------------------------------

    def _reparent(self) -> List[TreeNode]:
        roots: List[TreeNode] = []
        for key in sorted(self._nodes, key=len, reverse=True):
            node = self._nodes.pop(key)
            parent_key = parent_path(key)
            parent = self._nodes.get(parent_key) if parent_key else None
            if parent is not None:
                parent.children.append(node)
            else:
                roots.append(node)
        return roots


def build_tree(
        files: Iterable[FileContent],
        count_tokens: Optional[TokenCounter] = None,
        collision_policy: str = "last",
) -> BuildOutcome:
    """
    Build the unordered tree for a batch of files.

    Args:
        files: File contents to place.
        count_tokens: Token counter, or None when token counting is disabled.
        collision_policy: How to treat files with identical normalized paths.

    Returns:
        BuildOutcome: Roots plus totals over placed files.
    """
    return TreeBuilder(count_tokens, collision_policy).build(files)
