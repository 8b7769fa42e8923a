from __future__ import annotations

"""
File Metadata Filtering Engine.

Combines the size limit, gitignore rules, the text heuristic and the
include/exclude substring lists into one predicate evaluated per entry
before any content is read. Every check is independent; an entry is
retained only if it passes all of them.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from contexter.core.pipeline.components.ignore_matcher import IgnoreMatcher
from contexter.core.processing.paths import root_relative_path
from contexter.core.processing.text_heuristic import is_likely_text
from contexter.domain.tree_models import FileMetadata

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# SUBSTRING MATCHING
# -----------------------------------------------------------------------------

def matches_any(path: str, patterns: Sequence[str]) -> bool:
    """
    Verify if any pattern occurs as a substring of the path.

    Args:
        path: Root-relative path to evaluate.
        patterns: Plain substrings.

    Returns:
        bool: True if at least one pattern is contained in the path.
    """
    return any(p in path for p in patterns if p)


def matches_include(path: str, patterns: Sequence[str]) -> bool:
    """
    Verify if a path satisfies the inclusion list.

    An empty list accepts everything.
    """
    active = [p for p in patterns if p]
    if not active:
        return True
    return matches_any(path, active)


# -----------------------------------------------------------------------------
# METADATA FILTER
# -----------------------------------------------------------------------------

class MetadataFilter:
    """
    Single-pass predicate over file metadata.

    Attributes:
        matcher: Compiled gitignore rules.
        text_only: Drop files whose name marks them as binary.
        max_file_size: Byte limit for files; None disables the check.
        include_patterns: Substrings of which at least one must occur.
        exclude_patterns: Substrings none of which may occur.
    """

    def __init__(
            self,
            matcher: IgnoreMatcher,
            *,
            text_only: bool = True,
            max_file_size: Optional[int] = None,
            include_patterns: Optional[Sequence[str]] = None,
            exclude_patterns: Optional[Sequence[str]] = None,
    ) -> None:
        self.matcher = matcher
        self.text_only = text_only
        self.max_file_size = max_file_size
        self.include_patterns: List[str] = list(include_patterns or [])
        self.exclude_patterns: List[str] = list(exclude_patterns or [])

    def accepts(self, entry: FileMetadata) -> bool:
        """
        Evaluate every predicate for one entry.

        Directory entries (trailing slash) are only subject to the ignore
        rules and the exclusion list, since size, text and inclusion
        checks describe files.
        """
        rel = root_relative_path(entry.path)
        if not rel:
            return False

        is_dir = entry.is_dir
        if self.matcher.is_ignored(rel, is_dir):
            return False

        if matches_any(rel, self.exclude_patterns):
            return False

        if is_dir:
            return True

        if self.text_only and not is_likely_text(rel):
            return False

        if self.max_file_size is not None and entry.size > self.max_file_size:
            return False

        return matches_include(rel, self.include_patterns)

    def filter(self, entries: Iterable[FileMetadata]) -> List[str]:
        """
        Return the paths of the accepted entries, in input order.

        Args:
            entries: Metadata records from the file source.

        Returns:
            List[str]: Original (unmodified) paths of retained entries.
        """
        kept: List[str] = []
        total = 0
        for entry in entries:
            total += 1
            if self.accepts(entry):
                kept.append(entry.path)

        logger.debug(f"Metadata filter kept {len(kept)} of {total} entries.")
        return kept
