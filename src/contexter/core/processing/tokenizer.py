from __future__ import annotations

"""
BPE Token Counting Engine.

Wraps the tiktoken ``cl100k_base`` encoding behind a process-wide,
lazily constructed instance. Construction happens once, under a lock;
after that the instance is only read, so concurrent callers need no
further coordination. A failed construction is remembered and re-raised
so that every caller sees the same fatal error.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from contexter.domain.constants import TOKENIZER_ENCODING
from contexter.domain.errors import TokenizerError

logger = logging.getLogger(__name__)

# --- Dynamic Dependency Check ---
TIKTOKEN_AVAILABLE = False
try:
    import tiktoken

    TIKTOKEN_AVAILABLE = True
except ImportError:
    pass


# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract interface for anything that can count tokens in a text.
    """

    @abstractmethod
    def count(self, text: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.

        Returns:
            int: Total token count.
        """
        pass


class TiktokenStrategy(TokenizerStrategy):
    """
    Deterministic BPE encoder backed by tiktoken.

    Special-token markers inside the text are encoded as the special
    tokens they name instead of raising.
    """

    def __init__(self, encoding_name: str = TOKENIZER_ENCODING) -> None:
        if not TIKTOKEN_AVAILABLE:
            raise TokenizerError("Library 'tiktoken' is not installed.")

        try:
            self._encoding = tiktoken.get_encoding(encoding_name)
        except Exception as e:
            raise TokenizerError(f"Failed to load encoding '{encoding_name}': {e}") from e

        self.encoding_name = encoding_name

    def encode(self, text: str) -> List[int]:
        """Encode text into its token id sequence."""
        return self._encoding.encode(text, allowed_special="all")

    def count(self, text: str) -> int:
        """Return the length of the encoded token sequence."""
        if not text:
            return 0
        return len(self.encode(text))


# -----------------------------------------------------------------------------
# PROCESS-WIDE INSTANCE
# -----------------------------------------------------------------------------

_INSTANCE: Optional[TokenizerStrategy] = None
_INIT_ERROR: Optional[TokenizerError] = None
_INIT_LOCK = threading.Lock()


def get_tokenizer() -> TokenizerStrategy:
    """
    Return the shared tokenizer, constructing it on first use.

    Raises:
        TokenizerError: If the encoding cannot be initialized. The error
                        is cached and raised again on every later call.
    """
    global _INSTANCE, _INIT_ERROR

    instance = _INSTANCE
    if instance is not None:
        return instance

    with _INIT_LOCK:
        if _INSTANCE is None:
            if _INIT_ERROR is not None:
                raise _INIT_ERROR
            try:
                _INSTANCE = TiktokenStrategy()
            except TokenizerError as e:
                logger.critical(f"Tokenizer initialization failed: {e}")
                _INIT_ERROR = e
                raise
            logger.debug(f"Tokenizer initialized with encoding '{TOKENIZER_ENCODING}'.")
        return _INSTANCE


def count_tokens(text: str) -> int:
    """
    Count tokens with the shared tokenizer.

    Args:
        text: Input string content.

    Returns:
        int: Token count (0 for empty text).
    """
    return get_tokenizer().count(text)
