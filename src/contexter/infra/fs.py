from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Local-directory file source for the CLI. Enumerates a directory the way
a browser folder picker reports it (every path prefixed with the name of
the selected folder, directories with a trailing slash) and reads the
contents of the entries that survived metadata filtering.
"""

import logging
import os
from typing import Iterable, List, Optional

from contexter.core.processing.paths import root_relative_path
from contexter.core.processing.text_heuristic import looks_binary
from contexter.domain.constants import BINARY_CONTROL_RATIO, VCS_DIR_NAME
from contexter.domain.tree_models import FileContent, FileMetadata

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_input_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variables and '~'. Reverts to ``fallback`` if the
    input is empty.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))


def root_name_of(root_dir: str) -> str:
    """Return the folder name used as the first segment of every entry path."""
    return os.path.basename(os.path.abspath(root_dir).rstrip(os.sep)) or "root"


# -----------------------------------------------------------------------------
# ENUMERATION AND READING
# -----------------------------------------------------------------------------

def scan_directory(root_dir: str) -> List[FileMetadata]:
    """
    Walk a local directory and report every entry with its size.

    The VCS metadata directory is not descended into.

    Args:
        root_dir: Directory selected by the user.

    Returns:
        List[FileMetadata]: Directory entries ('name/') and files, sorted per level.
    """
    root_abs = os.path.abspath(root_dir)
    root_name = root_name_of(root_abs)
    entries: List[FileMetadata] = []

    for current, dirs, files in os.walk(root_abs):
        dirs[:] = sorted(d for d in dirs if d != VCS_DIR_NAME)
        files.sort()

        rel_dir = os.path.relpath(current, root_abs)
        prefix = root_name if rel_dir == "." else f"{root_name}/{rel_dir.replace(os.sep, '/')}"
        entries.append(FileMetadata(path=f"{prefix}/", size=0))

        for file_name in files:
            full_path = os.path.join(current, file_name)
            try:
                size = os.path.getsize(full_path)
            except OSError as e:
                logger.warning(f"Cannot stat '{full_path}': {e}")
                continue
            entries.append(FileMetadata(path=f"{prefix}/{file_name}", size=size))

    logger.debug(f"Scanned {len(entries)} entries under {root_abs}.")
    return entries


def read_contents(
        root_dir: str,
        paths: Iterable[str],
        text_only: bool = True,
        control_ratio: float = BINARY_CONTROL_RATIO,
) -> List[FileContent]:
    """
    Read the retained entries produced by scan_directory.

    Directory entries are passed through as empty directory markers.
    Undecodable bytes are replaced. Files whose bytes look binary are
    dropped when ``text_only`` is set; unreadable files are dropped with
    a warning.

    Args:
        root_dir: Directory that was scanned.
        paths: Retained entry paths.
        text_only: Apply the content-based binary check.
        control_ratio: Threshold for the binary check.

    Returns:
        List[FileContent]: Contents keyed by the original entry paths.
    """
    root_abs = os.path.abspath(root_dir)
    out: List[FileContent] = []

    for path in paths:
        if path.endswith("/"):
            out.append(FileContent(path=path, content=""))
            continue

        rel = root_relative_path(path)
        full_path = os.path.join(root_abs, *rel.split("/"))
        try:
            with open(full_path, "rb") as f:
                raw = f.read()
        except OSError as e:
            logger.warning(f"Failed to read '{full_path}': {e}")
            continue

        if text_only and looks_binary(raw, control_ratio):
            logger.info(f"Skipping binary content: {path}")
            continue

        out.append(FileContent(path=path, content=raw.decode("utf-8", errors="replace")))

    return out


def read_text_file(path: str) -> str:
    """Read a UTF-8 text file, replacing undecodable bytes."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
