from __future__ import annotations

"""Helpers for consistent error logging."""

import logging

__all__ = ["log_exception", "log_suppressed"]


def log_exception(message: str, exc: BaseException, logger: logging.Logger) -> None:
    """Log ``exc`` with ``message`` and its traceback using ``logger``."""

    logger.error("%s: %s", message, exc, exc_info=exc)


def log_suppressed(message: str, exc: BaseException, logger: logging.Logger) -> None:
    """Record a best-effort failure at DEBUG without surfacing it."""

    logger.debug("%s: %s", message, exc)
