from __future__ import annotations

"""
Logging Lifecycle.

The root logger gets a single QueueHandler; a QueueListener thread drains
the queue into the configured sinks, so file writes never run on the
thread doing the tree work. The active session is kept at module level:
configuring twice is a no-op unless forced, and shutdown stops the
listener, flushes the sinks and detaches everything it attached.
"""

import atexit
import logging
import queue
import sys
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from contexter.infra.logging.config import LoggingConfig
from contexter.infra.logging.handlers import build_sinks, is_tagged, tag


@dataclass
class _Session:
    queue_handler: QueueHandler
    listener: QueueListener
    sinks: List[logging.Handler]


_session: Optional[_Session] = None


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route the root logger through a queue to the sinks described by ``cfg``.

    Args:
        cfg: Sink and threshold settings.
        force: Tear down an existing session and start a new one.

    Returns:
        logging.Logger: The root logger.
    """
    global _session
    root = logging.getLogger()

    if _session is not None and not force:
        return root
    shutdown_logging()

    try:
        sinks = build_sinks(cfg)
        root.setLevel(cfg.root_threshold)
        if not sinks:
            return root

        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
        queue_handler = tag(QueueHandler(log_queue))
        listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
        listener.start()
        root.addHandler(queue_handler)
    except Exception:
        # Logging must never take the application down with it
        _install_emergency_console(root)
        return root

    _session = _Session(queue_handler, listener, sinks)
    atexit.register(shutdown_logging)
    return root


def get_logger(name: str) -> logging.Logger:
    """Named logger; a thin alias kept so callers import from one place."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Drain the queue, close the sinks and detach our handlers. Safe to call twice."""
    global _session
    session, _session = _session, None

    root = logging.getLogger()
    if session is not None:
        session.listener.stop()
        for sink in session.sinks:
            sink.close()

    for handler in list(root.handlers):
        if is_tagged(handler):
            root.removeHandler(handler)
            handler.close()


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _install_emergency_console(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if is_tagged(handler):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
    root.addHandler(tag(handler))
    root.setLevel(logging.INFO)
    root.warning("Logging infrastructure failed. Switched to emergency console.")
