from __future__ import annotations

import logging
from typing import Iterable

from shared.logging.json import configure_logging as _shared_configure_logging
from shared.logging.logger import get_logger as _shared_get_logger
from shared.logging.logger import is_configured

from .config import settings


class RedactingFilter(logging.Filter):
    """Blank out whole messages that mention a sensitive pattern.

    Structured ``extra`` fields are handled by the JSON formatter; this
    covers free-form messages such as exception strings that may embed an
    API token.
    """

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = [p.lower() for p in patterns]

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            msg = record.getMessage().lower()
        except (TypeError, ValueError):  # pragma: no cover - bad format args
            return True
        if any(p in msg for p in self.patterns):
            record.msg = "[REDACTED SENSITIVE LOG CONTENT]"
            record.args = ()
        return True


def configure_logging():
    if is_configured():
        return
    _shared_configure_logging(
        service=settings.otel_service_name,
        level=settings.app_log_level,
        environment=settings.app_environment,
        redaction_patterns=settings.app_log_redaction_patterns,
    )
    # Attach redaction filter at root so it applies to all handlers
    root = logging.getLogger()
    for h in root.handlers:
        h.addFilter(RedactingFilter(settings.app_log_redaction_patterns))


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return _shared_get_logger(name)
