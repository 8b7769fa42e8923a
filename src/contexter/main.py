from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Installs a last-resort exception hook so that unexpected crashes are
logged with their stack trace before the process exits, then hands
control to the CLI controller.
"""

import logging
import sys
import traceback
from typing import Any, List, Optional

from contexter.interface.cli.app import main as cli_main


# -----------------------------------------------------------------------------
# GLOBAL SUPERVISOR (EXCEPTION HANDLING)
# -----------------------------------------------------------------------------

def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Trap unhandled exceptions, log them and report them on stderr.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    if issubclass(exctype, KeyboardInterrupt):
        sys.__excepthook__(exctype, value, tb)
        return

    stack_trace = "".join(traceback.format_exception(exctype, value, tb))

    logger = logging.getLogger("contexter.supervisor")
    logger.critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (CONTEXTER)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Console-script entry point."""
    sys.excepthook = global_exception_handler
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
