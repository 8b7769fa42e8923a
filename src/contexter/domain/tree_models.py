from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the input records, the mutable tree node used by the builder,
aggregator and recalculator, and the read-only result objects handed
back to interface layers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from contexter.domain.errors import InputDecodeError

# -----------------------------------------------------------------------------
# INPUT RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileMetadata:
    """
    Pre-read description of one selected entry.

    Attributes:
        path: Slash-separated path, usually prefixed by the selected root folder.
              A trailing slash marks a directory entry.
        size: Size of the entry in bytes.
    """
    path: str
    size: int = 0

    @property
    def is_dir(self) -> bool:
        return self.path.endswith("/") or self.path.endswith("\\")


@dataclass(frozen=True)
class FileContent:
    """
    Content of a retained file.

    Attributes:
        path: Path of the file as supplied by the file source.
        content: Decoded text content.
    """
    path: str
    content: str = ""


# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class TreeNode:
    """
    A file leaf or directory in the processed tree.

    Nodes are created once by the tree builder. Afterwards only the
    aggregate fields (size, token_count) and the order of children change.

    Attributes:
        path: Unique, normalized path of the node.
        name: Display name (last path segment).
        is_dir: True for directories.
        size: Byte size; for directories the sum over descendant files.
        token_count: Token count, None when token counting is disabled.
        children: Ordered child nodes, always empty for files.
    """
    path: str
    name: str
    is_dir: bool = False
    size: Optional[int] = None
    token_count: Optional[int] = None
    children: List["TreeNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format, omitting absent optional fields."""
        data = self._fields_dict()
        stack = [(self, data)]
        while stack:
            node, out = stack.pop()
            if "children" not in out:
                continue
            for child in node.children:
                child_out = child._fields_dict()
                out["children"].append(child_out)
                stack.append((child, child_out))
        return data

    def _fields_dict(self) -> Dict[str, Any]:
        """This node's own wire fields; 'children' is left empty for the caller to fill."""
        data: Dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "is_dir": self.is_dir,
        }
        if self.token_count is not None:
            data["token_count"] = self.token_count
        if self.children:
            data["children"] = []
        if self.size is not None:
            data["size"] = self.size
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "TreeNode":
        """
        Rebuild a node (and its subtree) from the wire format.

        The subtree is walked with an explicit stack, so arbitrarily deep
        trees decode without hitting the recursion limit.

        Raises:
            InputDecodeError: If any record in the subtree is malformed.
        """
        root, raw_children = cls._from_fields(data)
        stack = [(root, raw_children)]
        while stack:
            parent, pending = stack.pop()
            for raw_child in pending:
                child, grand_children = cls._from_fields(raw_child)
                parent.children.append(child)
                if grand_children:
                    stack.append((child, grand_children))
        return root

    @classmethod
    def _from_fields(cls, data: Any) -> Tuple["TreeNode", List[Any]]:
        """Validate one wire record; returns the childless node and its raw children."""
        if not isinstance(data, Mapping):
            raise InputDecodeError(f"Tree node must be an object, got {type(data).__name__}.")

        path = data.get("path")
        if not isinstance(path, str):
            raise InputDecodeError("Tree node is missing a string 'path'.")

        name = data.get("name")
        if name is None:
            name = path.rstrip("/").rsplit("/", 1)[-1]
        if not isinstance(name, str):
            raise InputDecodeError(f"Tree node {path!r} has a non-string 'name'.")

        is_dir = data.get("is_dir", False)
        if not isinstance(is_dir, bool):
            raise InputDecodeError(f"Tree node {path!r} has a non-boolean 'is_dir'.")

        size = _optional_count(data.get("size"), "size", path)
        token_count = _optional_count(data.get("token_count"), "token_count", path)

        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            raise InputDecodeError(f"Tree node {path!r} has non-list 'children'.")
        if raw_children and not is_dir:
            raise InputDecodeError(f"File node {path!r} cannot have children.")

        node = cls(path=path, name=name, is_dir=is_dir, size=size, token_count=token_count)
        return node, raw_children


def _optional_count(value: Any, field_name: str, path: str) -> Optional[int]:
    """Validate an optional non-negative integer field."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InputDecodeError(f"Tree node {path!r} has an invalid '{field_name}': {value!r}.")
    return value


# -----------------------------------------------------------------------------
# RESULT MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterResult:
    """
    Outcome of the metadata filtering stage.

    Attributes:
        paths: Retained input paths, in input order.
        elapsed_ms: Wall-clock duration of the call.
    """
    paths: List[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"paths": list(self.paths), "processingTimeMs": self.elapsed_ms}


@dataclass(frozen=True)
class ProcessingResult:
    """
    Outcome of building and aggregating the tree.

    Attributes:
        roots: Top-level nodes in display order.
        total_tokens: Tokens over all placed files (0 when counting is off).
        total_files: Number of placed file leaves.
        total_size: Bytes over all placed files.
        elapsed_ms: Wall-clock duration of the call.
    """
    roots: List[TreeNode] = field(default_factory=list)
    total_tokens: int = 0
    total_files: int = 0
    total_size: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_tree": [root.to_dict() for root in self.roots],
            "total_tokens": self.total_tokens,
            "total_files": self.total_files,
            "total_size": self.total_size,
            "processing_time_ms": self.elapsed_ms,
        }
