from __future__ import annotations

"""
Logging Sinks.

Factories for the stderr and rotating-file handlers. Every handler they
return is tagged so teardown only removes what this package installed
and leaves handlers owned by libraries or pytest alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from contexter.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_contexter_handler"


def tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_tagged(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def console_handler(cfg: LoggingConfig) -> logging.Handler:
    """Stderr handler at the console threshold."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(cfg.console_threshold)
    handler.setFormatter(logging.Formatter(cfg.console_fmt))
    return tag(handler)


def file_handler(cfg: LoggingConfig) -> Optional[logging.Handler]:
    """
    Size-rotated file handler at the file threshold.

    Missing parent directories are created. An unusable path is reported
    on stderr and yields None, so a bad --log-file never aborts a run.

    Returns:
        Optional[logging.Handler]: The handler, or None if the file cannot be opened.
    """
    if not cfg.log_file:
        return None

    target = os.path.abspath(cfg.log_file)
    try:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=int(cfg.max_bytes),
            backupCount=int(cfg.backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{cfg.log_file}': {e}\n")
        return None

    handler.setLevel(cfg.file_threshold)
    handler.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
    return tag(handler)


def build_sinks(cfg: LoggingConfig) -> List[logging.Handler]:
    """Every enabled sink, console first."""
    sinks: List[logging.Handler] = []
    if cfg.console:
        sinks.append(console_handler(cfg))
    sink = file_handler(cfg)
    if sink is not None:
        sinks.append(sink)
    return sinks
