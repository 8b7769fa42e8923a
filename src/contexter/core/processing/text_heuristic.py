from __future__ import annotations

"""
Text / Binary Classification Heuristics.

Decides cheaply whether a path probably holds text, before any content
is read, and offers a content-based fallback for sources that can
inspect bytes. Both answers are advisory and never raise.
"""

import os
from typing import Union

from contexter.domain.constants import (
    BINARY_CONTROL_RATIO,
    BINARY_EXTENSIONS,
    TEXT_EXTENSIONS,
    TEXT_FILENAMES,
)

_WHITESPACE_CODES = frozenset({9, 10, 11, 12, 13})


def is_likely_text(path: str) -> bool:
    """
    Classify a path as probable text from its name alone.

    Known text extensions and special extensionless names are text,
    known binary extensions are not. Anything unrecognized is assumed
    to be text so unusual source files are not dropped silently.

    Args:
        path: File path or bare file name.

    Returns:
        bool: False only for known binary extensions.
    """
    file_name = path.replace("\\", "/").rsplit("/", 1)[-1]
    lowered = file_name.lower()

    if lowered in TEXT_FILENAMES:
        return True

    _, ext = os.path.splitext(lowered)
    ext = ext.lstrip(".")
    if not ext:
        return True
    if ext in TEXT_EXTENSIONS:
        return True
    if ext in BINARY_EXTENSIONS:
        return False
    return True


def looks_binary(content: Union[str, bytes], control_ratio: float = BINARY_CONTROL_RATIO) -> bool:
    """
    Inspect content for binary markers.

    A NUL anywhere marks the content as binary, as does a share of
    non-whitespace control characters above ``control_ratio``.

    Args:
        content: Decoded text or raw bytes.
        control_ratio: Maximum tolerated share of control characters.

    Returns:
        bool: True if the content looks binary. Empty content is text.
    """
    if not content:
        return False

    if isinstance(content, bytes):
        if b"\x00" in content:
            return True
        codes = list(content)
    else:
        if "\x00" in content:
            return True
        codes = [ord(ch) for ch in content]

    control = sum(
        1 for code in codes
        if (code < 32 or code == 127) and code not in _WHITESPACE_CODES
    )
    return (control / len(codes)) > control_ratio
