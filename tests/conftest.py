from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A deterministic word-based tokenizer so no test depends on the BPE
   encoding files being downloadable.
3. Shared option dictionaries used across unit tests.
"""

import os
import sys
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from contexter.core.processing.tokenizer import TokenizerStrategy  # noqa: E402


class WordTokenizer(TokenizerStrategy):
    """One token per whitespace-separated word; empty text has no tokens."""

    def __init__(self) -> None:
        self.calls = 0

    def count(self, text: str) -> int:
        self.calls += 1
        return len(text.split())


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def word_tokenizer() -> WordTokenizer:
    """Return a fresh deterministic tokenizer."""
    return WordTokenizer()


@pytest.fixture
def default_options() -> Dict[str, Any]:
    """
    Return a complete option dictionary matching the engine defaults.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        "text_only": True,
        "max_file_size": 2 * 1024 * 1024,
        "include_patterns": [],
        "exclude_patterns": [],
        "hide_empty_folders": True,
        "show_token_count": True,
        "collision_policy": "last",
        "include_path_headers": True,
        "binary_control_ratio": 0.10,
    }
