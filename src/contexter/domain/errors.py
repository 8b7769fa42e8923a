from __future__ import annotations

"""
Domain Error Hierarchy.

Exceptions raised by the filtering and tree engine. Only decode and
tokenizer failures abort an operation; pattern and path problems are
reported and skipped where they occur.
"""


class ContexterError(Exception):
    """Base class for all engine errors."""


class InputDecodeError(ContexterError):
    """A supplied input record is malformed. Fails the whole call."""


class PatternError(ContexterError):
    """
    A gitignore line could not be compiled.

    Attributes:
        line_no: 1-based line number in the supplied pattern text.
        line: The offending raw line.
    """

    def __init__(self, line_no: int, line: str, reason: str) -> None:
        super().__init__(f"Invalid gitignore pattern on line {line_no} ({line!r}): {reason}")
        self.line_no = line_no
        self.line = line


class PathError(ContexterError):
    """A path normalizes to empty or cannot be placed in the tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot place path {path!r}: {reason}")
        self.path = path


class PathCollisionError(PathError):
    """Two input files normalize to the same tree path."""


class TokenizerError(ContexterError):
    """The BPE tokenizer could not be initialized."""
