from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, option resolution
(defaults, config file, command-line overrides), the
scan -> filter -> read -> process pipeline over a local directory, and
result rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from contexter.core.analysis.tree_renderer import render_tree
from contexter.core.pipeline.components.ignore_matcher import combine_gitignore_sources
from contexter.core.pipeline.engine import (
    filter_files,
    merge_to_markdown,
    process_files,
    recalculate_counts,
)
from contexter.core.pipeline.stages.validator import validate_config
from contexter.core.processing.paths import format_file_size
from contexter.domain.config import get_default_config, load_config_file
from contexter.domain.errors import ContexterError
from contexter.domain.tree_models import ProcessingResult, TreeNode
from contexter.infra.fs import normalize_input_path, read_contents, read_text_file, scan_directory
from contexter.infra.logging import LoggingConfig, configure_logging, get_logger
from contexter.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Exit code (0 ok, 1 failure, 2 invalid input path, 130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file))

    # 1. Resolve options (defaults < config file < command line)
    raw_conf = get_default_config()
    if args.config_file:
        raw_conf.update(load_config_file(args.config_file))
    raw_conf.update(cli_args.args_to_overrides(args))

    options, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(options, ensure_ascii=False, indent=2))
        return 0

    try:
        # 2. Recalculation-only mode
        if args.tree_file:
            return _run_recalculation(args.tree_file, options, args.json_output)

        # 3. Full pipeline over a local directory
        input_path = normalize_input_path(args.input_path, os.getcwd())
        if not os.path.isdir(input_path):
            msg = f"Input directory does not exist: {input_path}"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return 2

        return _run_pipeline(input_path, args, options)

    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except (ContexterError, OSError, ValueError) as e:
        logger.debug("Operation failed.", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

# -----------------------------------------------------------------------------
# WORKFLOWS
# -----------------------------------------------------------------------------

def _run_pipeline(input_path: str, args: Any, options: Dict[str, Any]) -> int:
    """Scan, filter, read and process a local directory."""
    gitignore_text = _load_gitignore_text(input_path, args.gitignore_files)

    metadata = scan_directory(input_path)
    filtered = filter_files(metadata, gitignore_text, options)

    contents = read_contents(
        input_path,
        filtered.paths,
        text_only=options["text_only"],
        control_ratio=options["binary_control_ratio"],
    )
    result = process_files(contents, options)

    if args.markdown_path:
        files_only = [item for item in contents if not item.path.endswith("/")]
        document = merge_to_markdown(files_only, options)
        if args.markdown_path == "-":
            print(document)
        else:
            with open(args.markdown_path, "w", encoding="utf-8") as f:
                f.write(document + "\n")
            logger.info(f"Markdown written to {args.markdown_path}")

    if args.json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    elif args.markdown_path != "-":
        _print_human_summary(result, options)

    return 0


def _load_gitignore_text(input_path: str, gitignore_files: Optional[List[str]]) -> str:
    """
    Merge the given .gitignore files into one rule text.

    A file inside the input directory governs its own directory; one
    outside it applies from the input directory down.
    """
    if not gitignore_files:
        return ""

    sources: Dict[str, str] = {}
    for file_path in gitignore_files:
        rel = os.path.relpath(os.path.abspath(file_path), input_path)
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            rel = os.path.basename(file_path)
        sources[rel.replace(os.sep, "/")] = read_text_file(file_path)

    logger.debug(f"Merging {len(sources)} gitignore file(s): {sorted(sources)}")
    return combine_gitignore_sources(sources)


def _run_recalculation(tree_file: str, options: Dict[str, Any], json_output: bool) -> int:
    """Load an exported tree, re-sum it and print it."""
    with open(tree_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("file_tree", [])

    roots = recalculate_counts(data, options)

    if json_output:
        print(json.dumps([root.to_dict() for root in roots], ensure_ascii=False, indent=2))
    else:
        _print_tree(roots, options)
    return 0

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_tree(roots: List[TreeNode], options: Dict[str, Any]) -> None:
    for line in render_tree(roots, show_size=True, show_tokens=options["show_token_count"]):
        print(line)


def _print_human_summary(result: ProcessingResult, options: Dict[str, Any]) -> None:
    """Print the tree followed by the totals."""
    _print_tree(result.roots, options)
    print("")
    print(f"Files: {result.total_files}")
    print(f"Size: {format_file_size(result.total_size)}")
    if options["show_token_count"]:
        print(f"Tokens: {result.total_tokens:,}")
    print(f"Elapsed: {result.elapsed_ms:.1f} ms")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
