"""Logging for capplan.

Two levels sit between the standard ones so the CLI's ``-v`` count maps onto
what the planner does:

- CHANGES (25): mutations applied to the entity store
- CHECKS (15): each (task, day, resource) overload check
- DEBUG: every assignment counted into a daily load
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25
CHECKS_LEVEL = 15

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

# Index is the CLI verbosity; anything higher is clamped to the last entry
_VERBOSITY_LEVELS = (logging.ERROR, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)


class CapplanLogger(logging.Logger):
    """Logger with one method per planner verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a store mutation."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an overload check."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> CapplanLogger:
    """Return the shared ``capplan`` logger."""
    logging.setLoggerClass(CapplanLogger)
    logger = logging.getLogger("capplan")
    assert isinstance(logger, CapplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send planner logs to a stream at the given verbosity.

    Can be called again to reconfigure; earlier handlers are dropped.

    Args:
        verbosity: 0=errors only, 1=changes, 2=checks, 3=debug
        stream: Output stream (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_VERBOSITY_LEVELS[max(0, min(verbosity, len(_VERBOSITY_LEVELS) - 1))])

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and go back to errors-only, propagating to the root logger."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True


def checks_enabled() -> bool:
    """True when overload checks are being logged (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    """True when per-assignment load details are being logged (verbosity >= 3)."""
    return get_logger().isEnabledFor(logging.DEBUG)
