"""Logger lookup and the process-wide "JSON logging installed" flag."""

from __future__ import annotations

import logging

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Named logger that propagates to the root JSON handler."""
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def is_configured() -> bool:
    return _configured


def mark_configured():
    """Called by shared.logging.json.configure_logging."""
    global _configured
    _configured = True
