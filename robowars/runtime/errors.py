"""Failure policy for calls into pluggable strategies."""

from __future__ import annotations

import logging
from typing import TypeAlias

StrategyFailures: TypeAlias = tuple[type[BaseException], ...]
# Anything a plugged-in strategy raises is contained; interpreter exits are not.
STRATEGY_FAILURES: StrategyFailures = (Exception,)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *args: object,
    level: int = logging.WARNING,
) -> None:
    """Log a tolerated failure with its traceback."""
    logger.log(level, message, *args, exc_info=True)
