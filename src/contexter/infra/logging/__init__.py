from __future__ import annotations

from .config import LoggingConfig, level_number
from .core import configure_logging, get_logger, shutdown_logging

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "level_number",
    "shutdown_logging",
]
