from __future__ import annotations

"""
Core orchestration pipeline.

Public operation surface of the engine:
1. filter_files: metadata -> retained paths, before any content is read.
2. process_files: retained contents -> built, aggregated, ordered tree.
3. recalculate_counts: re-sum an existing tree after option changes.
4. merge_to_markdown: contents -> prompt-ready markdown document.

Each call validates its options, decodes its input records (failing the
whole call on malformed input) and runs synchronously to completion.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from contexter.core.analysis.aggregator import aggregate_roots, order_nodes
from contexter.core.analysis.recalculator import recalculate
from contexter.core.analysis.tree_builder import build_tree
from contexter.core.pipeline.components.filters import MetadataFilter
from contexter.core.pipeline.components.ignore_matcher import IgnoreMatcher
from contexter.core.pipeline.components.markdown import merge_files_to_markdown
from contexter.core.pipeline.stages.validator import validate_config
from contexter.core.processing.tokenizer import TokenizerStrategy, get_tokenizer
from contexter.domain.errors import InputDecodeError
from contexter.domain.tree_models import (
    FileContent,
    FileMetadata,
    FilterResult,
    ProcessingResult,
    TreeNode,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# OPERATIONS
# -----------------------------------------------------------------------------

def filter_files(
        metadata: Iterable[Any],
        gitignore_text: Optional[str] = "",
        options: Optional[Dict[str, Any]] = None,
) -> FilterResult:
    """
    Select which entries are worth reading.

    Args:
        metadata: FileMetadata records or {'path', 'size'} mappings.
        gitignore_text: Raw gitignore pattern text supplied by the caller.
        options: Partial options (text_only, max_file_size, include/exclude patterns).

    Returns:
        FilterResult: Retained paths in input order and the elapsed time.

    Raises:
        InputDecodeError: If any record is malformed.
    """
    start = time.perf_counter()
    cfg = _resolve_options(options)
    entries = decode_metadata(metadata)

    metadata_filter = MetadataFilter(
        IgnoreMatcher.from_text(gitignore_text),
        text_only=cfg["text_only"],
        max_file_size=cfg["max_file_size"],
        include_patterns=cfg["include_patterns"],
        exclude_patterns=cfg["exclude_patterns"],
    )
    paths = metadata_filter.filter(entries)

    elapsed = _elapsed_ms(start)
    logger.info(f"Filtered {len(entries)} entries down to {len(paths)} in {elapsed:.2f} ms.")
    return FilterResult(paths=paths, elapsed_ms=elapsed)


def process_files(
        files: Iterable[Any],
        options: Optional[Dict[str, Any]] = None,
        *,
        tokenizer: Optional[TokenizerStrategy] = None,
) -> ProcessingResult:
    """
    Build the annotated directory tree for a batch of file contents.

    Args:
        files: FileContent records or {'path', 'content'} mappings.
               Paths ending in '/' denote (possibly empty) directories.
        options: Partial options (show_token_count, hide_empty_folders, collision_policy).
        tokenizer: Token counter override; defaults to the shared BPE tokenizer.

    Returns:
        ProcessingResult: Ordered roots and totals over placed files.

    Raises:
        InputDecodeError: If any record is malformed.
        PathCollisionError: Under the 'error' collision policy.
        TokenizerError: If the shared tokenizer cannot be initialized.
    """
    start = time.perf_counter()
    cfg = _resolve_options(options)
    contents = decode_files(files)

    show_tokens = cfg["show_token_count"]
    counter = None
    if show_tokens:
        counter = (tokenizer or get_tokenizer()).count

    outcome = build_tree(contents, counter, cfg["collision_policy"])
    roots, _, _ = aggregate_roots(outcome.roots, show_tokens, cfg["hide_empty_folders"])
    order_nodes(roots)

    elapsed = _elapsed_ms(start)
    logger.info(
        f"Processed {outcome.total_files} files ({outcome.total_size} bytes, "
        f"{outcome.total_tokens} tokens) in {elapsed:.2f} ms."
    )
    return ProcessingResult(
        roots=roots,
        total_tokens=outcome.total_tokens if show_tokens else 0,
        total_files=outcome.total_files,
        total_size=outcome.total_size,
        elapsed_ms=elapsed,
    )


def recalculate_counts(tree: Iterable[Any], options: Optional[Dict[str, Any]] = None) -> List[TreeNode]:
    """
    Recompute directory aggregates of an existing tree.

    No content is re-read or re-tokenized and the structure is kept as
    supplied; only size and token fields of directories change.

    Args:
        tree: Root TreeNode objects or their dictionary form.
        options: Partial options (show_token_count).

    Returns:
        List[TreeNode]: The same roots (or decoded ones), updated in place.

    Raises:
        InputDecodeError: If the supplied tree is malformed.
    """
    cfg = _resolve_options(options)
    roots = decode_tree(tree)
    recalculate(roots, cfg["show_token_count"])
    return roots


def merge_to_markdown(files: Iterable[Any], options: Optional[Dict[str, Any]] = None) -> str:
    """
    Assemble file contents into a markdown document.

    Args:
        files: FileContent records or {'path', 'content'} mappings.
        options: Partial options (include_path_headers).

    Returns:
        str: One fenced block per file.

    Raises:
        InputDecodeError: If any record is malformed.
    """
    cfg = _resolve_options(options)
    return merge_files_to_markdown(decode_files(files), cfg["include_path_headers"])


# -----------------------------------------------------------------------------
# INPUT DECODING
# -----------------------------------------------------------------------------

def decode_metadata(records: Iterable[Any]) -> List[FileMetadata]:
    """Convert raw metadata records, rejecting the batch on the first bad one."""
    out: List[FileMetadata] = []
    for i, record in enumerate(_as_sequence(records, "metadata")):
        if isinstance(record, FileMetadata):
            out.append(record)
            continue
        path = _require_str(record, "path", i)
        size = _field(record, "size", i)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise InputDecodeError(f"Record {i}: 'size' must be a non-negative integer, got {size!r}.")
        out.append(FileMetadata(path=path, size=size))
    return out


def decode_files(records: Iterable[Any]) -> List[FileContent]:
    """Convert raw content records, rejecting the batch on the first bad one."""
    out: List[FileContent] = []
    for i, record in enumerate(_as_sequence(records, "files")):
        if isinstance(record, FileContent):
            out.append(record)
            continue
        out.append(FileContent(path=_require_str(record, "path", i), content=_require_str(record, "content", i)))
    return out


def decode_tree(records: Iterable[Any]) -> List[TreeNode]:
    """Convert raw tree roots; TreeNode instances are used as they are."""
    return [
        record if isinstance(record, TreeNode) else TreeNode.from_dict(record)
        for record in _as_sequence(records, "tree")
    ]


def _as_sequence(records: Any, label: str) -> Sequence[Any]:
    if isinstance(records, (str, bytes, Mapping)) or records is None:
        raise InputDecodeError(f"Expected a list of {label} records, got {type(records).__name__}.")
    try:
        return list(records)
    except TypeError as e:
        raise InputDecodeError(f"Expected a list of {label} records: {e}") from e


def _field(record: Any, key: str, index: int) -> Any:
    if not isinstance(record, Mapping):
        raise InputDecodeError(f"Record {index}: expected an object, got {type(record).__name__}.")
    if key not in record:
        raise InputDecodeError(f"Record {index}: missing field '{key}'.")
    return record[key]


def _require_str(record: Any, key: str, index: int) -> str:
    value = _field(record, key, index)
    if not isinstance(value, str):
        raise InputDecodeError(f"Record {index}: '{key}' must be a string, got {type(value).__name__}.")
    return value


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _resolve_options(options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    cfg, warnings = validate_config(options, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")
    return cfg


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0
