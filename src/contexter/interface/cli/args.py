from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
option overrides understood by the engine.
"""

import argparse
from typing import Any, Dict, List, Optional

from contexter.domain.constants import COLLISION_POLICIES

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the contexter CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="contexter",
        description=(
            "Build a filtered directory tree with byte sizes and token counts, "
            "and optionally a markdown bundle of the files for LLM prompts."
        ),
    )

    # --- Sources ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Directory to process (default: current directory).",
    )
    p.add_argument(
        "--gitignore",
        dest="gitignore_files",
        action="append",
        default=None,
        metavar="FILE",
        help=(
            "A .gitignore file to apply; repeat for nested ones. Each file's rules "
            "are scoped to its own directory, relative to the input directory."
        ),
    )
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON file with option overrides.",
    )
    p.add_argument(
        "--from-tree",
        dest="tree_file",
        default=None,
        help="Recalculate counts for a previously exported JSON tree instead of scanning.",
    )

    # --- Metadata filtering ---
    p.add_argument(
        "--all-files",
        action="store_true",
        help="Do not drop files that look binary.",
    )
    p.add_argument(
        "--max-file-size",
        dest="max_file_size",
        type=int,
        default=None,
        help="Maximum file size in bytes (0 disables the limit).",
    )
    p.add_argument(
        "--include",
        dest="include_patterns",
        default=None,
        help="Comma-separated substrings; keep only paths containing one of them.",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated substrings; drop paths containing any of them.",
    )

    # --- Tree processing ---
    p.add_argument(
        "--no-tokens",
        action="store_true",
        help="Skip token counting.",
    )
    p.add_argument(
        "--show-empty",
        action="store_true",
        help="Keep directories that have no retained files.",
    )
    p.add_argument(
        "--collision",
        dest="collision_policy",
        choices=sorted(COLLISION_POLICIES),
        default=None,
        help="What to do when two files normalize to the same path.",
    )

    # --- Output ---
    p.add_argument(
        "--markdown",
        dest="markdown_path",
        default=None,
        help="Write the merged markdown document to this file ('-' for stdout).",
    )
    p.add_argument(
        "--no-path-headers",
        action="store_true",
        help="Omit the '#### File:' header above each markdown block.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON instead of a tree.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective options and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write a DEBUG-level log to this file (rotated at 2 MiB).",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into option overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Only the options explicitly set on the command line.
    """
    overrides: Dict[str, Any] = {}

    if args.all_files:
        overrides["text_only"] = False
    if args.max_file_size is not None:
        overrides["max_file_size"] = args.max_file_size
    if args.include_patterns:
        overrides["include_patterns"] = _split_csv(args.include_patterns)
    if args.exclude_patterns:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)

    if args.no_tokens:
        overrides["show_token_count"] = False
    if args.show_empty:
        overrides["hide_empty_folders"] = False
    if args.collision_policy:
        overrides["collision_policy"] = args.collision_policy

    if args.no_path_headers:
        overrides["include_path_headers"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of trimmed items."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
