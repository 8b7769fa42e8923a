from __future__ import annotations

"""
Path Normalization Utilities.

Canonicalizes paths coming from browsers, folder pickers and local
walks into a single slash-separated form without volume or root
prefixes. Every component of the engine keys its work on these forms.
"""

import re
import unicodedata
from typing import List

_DRIVE_PREFIX_RX = re.compile(r"^[A-Za-z]:(?=/|$)")
_ROOT_PREFIX_RX = re.compile(r"^(?:\./|/)+")

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def sanitize_path(path: str) -> str:
    """
    Remove control characters and convert backslashes to forward slashes.

    Args:
        path: Raw path string.

    Returns:
        str: Sanitized path (prefixes and trailing slash preserved).
    """
    cleaned = "".join(ch for ch in path if unicodedata.category(ch) != "Cc")
    return cleaned.replace("\\", "/")


def strip_root_prefix(path: str) -> str:
    """
    Drop volume letters and leading '/' or './' sequences.

    A trailing slash, if present, is kept so that directory entries
    stay recognizable.
    """
    s = sanitize_path(path)
    s = _DRIVE_PREFIX_RX.sub("", s)
    return _ROOT_PREFIX_RX.sub("", s)


def normalize_path(path: str) -> str:
    """
    Produce the canonical form used as a tree key.

    Collapses repeated separators and '.' segments and removes leading
    and trailing slashes. May return an empty string.

    Args:
        path: Raw path string.

    Returns:
        str: Normalized path.
    """
    segments = [seg for seg in strip_root_prefix(path).split("/") if seg and seg != "."]
    return "/".join(segments)


def root_relative_path(path: str) -> str:
    """
    Strip the first segment (the user-selected root folder).

    A path without any separator is returned as-is, so a bare 'README'
    stays 'README' while the root folder entry 'project/' becomes empty.

    Args:
        path: Raw path, possibly with a trailing slash.

    Returns:
        str: Normalized root-relative path (may be empty).
    """
    s = strip_root_prefix(path)
    idx = s.find("/")
    if idx >= 0:
        s = s[idx + 1:]
    return normalize_path(s)


def parent_path(path: str) -> str:
    """Return the parent of a normalized path, or '' for top-level entries."""
    idx = path.rfind("/")
    return path[:idx] if idx > 0 else ""


def extract_file_name(path: str) -> str:
    """Return the last segment of a normalized path."""
    return path.rsplit("/", 1)[-1]


def ancestor_paths(path: str) -> List[str]:
    """
    List every implied ancestor directory of a normalized path.

    Ordered from the top-level directory down to the direct parent.
    'a/b/c.txt' -> ['a', 'a/b'].
    """
    segments = path.split("/")
    return ["/".join(segments[:i]) for i in range(1, len(segments))]


def format_file_size(num_bytes: int) -> str:
    """
    Format a byte count for display.

    Examples:
        0 -> '0 B', 1536 -> '1.5 KB', 1048576 -> '1.0 MB'
    """
    size = float(num_bytes)
    unit_index = 0
    while size >= 1024.0 and unit_index < len(_SIZE_UNITS) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{num_bytes} {_SIZE_UNITS[0]}"
    return f"{size:.1f} {_SIZE_UNITS[unit_index]}"
