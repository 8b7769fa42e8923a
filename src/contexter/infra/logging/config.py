from __future__ import annotations

"""
Logging Settings.

A frozen description of where log records go and at which threshold.
The console and the optional log file carry separate thresholds so the
CLI can stay quiet on stderr while keeping a detailed file trail.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_NAMES: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_number(level: Optional[str], default: int = logging.INFO) -> int:
    """Resolve a level name case-insensitively; unknown names give ``default``."""
    if not level:
        return default
    return LEVEL_NAMES.get(str(level).strip().upper(), default)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings consumed by ``configure_logging``.

    Attributes:
        level: Console threshold.
        console: Write records to stderr.
        log_file: Optional path of a size-rotated log file.
        file_level: Threshold of the log file; defaults to ``level``.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
        console_fmt: Record format on stderr.
        file_fmt: Record format in the log file.
        datefmt: Timestamp format in the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    file_level: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """
        Settings for one command-line run.

        Stderr shows warnings (everything with ``debug``); a requested log
        file always records at DEBUG.
        """
        return cls(
            level="DEBUG" if debug else "WARNING",
            console=True,
            log_file=log_file or None,
            file_level="DEBUG",
        )

    @property
    def console_threshold(self) -> int:
        return level_number(self.level)

    @property
    def file_threshold(self) -> int:
        return level_number(self.file_level, self.console_threshold)

    @property
    def root_threshold(self) -> int:
        """Lowest threshold among the enabled sinks."""
        thresholds = []
        if self.console:
            thresholds.append(self.console_threshold)
        if self.log_file:
            thresholds.append(self.file_threshold)
        return min(thresholds) if thresholds else self.console_threshold
