"""Structured logging configuration for idpgate.

Provides JSON and text formatters, a request-context filter that
injects the current trigger invocation id into every log record, and a
one-call ``configure_logging`` function driven by config settings.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from idpgate.config.settings import LoggingSettings

# Invocation id of the trigger currently being evaluated on this thread.
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "idpgate_request_id",
    default="-",
)

# Attributes every LogRecord carries.  Anything else on a record was
# passed as ``extra`` (event ids, user ids, trigger sources).
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter for the console and the audit file.

    Each line holds time, level, logger, invocation id and message, plus
    the security-event fields passed as ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", request_id_var.get()),
            "message": record.getMessage(),
        }
        data.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development / console use."""

    _FMT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(fmt=self._FMT, datefmt="%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


class RequestContextFilter(logging.Filter):
    """Inject the current invocation id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _audit_handler(settings: LoggingSettings) -> logging.Handler | None:
    """Rotating JSON audit file for ``idpgate.security``, if configured."""
    if not settings.audit_file:
        return None
    try:
        handler = RotatingFileHandler(
            settings.audit_file,
            maxBytes=settings.audit_max_file_size_bytes,
            backupCount=settings.audit_backup_count,
        )
    except OSError as exc:
        logging.getLogger("idpgate").warning(
            "Could not open audit log file %s: %s",
            settings.audit_file,
            exc,
        )
        return None
    handler.setFormatter(StructuredFormatter())
    return handler


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Configure the ``idpgate`` logger hierarchy from settings.

    Returns the root ``idpgate`` logger.
    """
    ctx_filter = RequestContextFilter()

    root = logging.getLogger("idpgate")
    root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
    root.handlers.clear()
    root.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(StructuredFormatter() if settings.format == "json" else TextFormatter())
    console.addFilter(ctx_filter)
    root.addHandler(console)

    security = logging.getLogger("idpgate.security")
    security.setLevel(logging.INFO)
    security.handlers.clear()
    audit = _audit_handler(settings)
    if audit is not None:
        audit.addFilter(ctx_filter)
        security.addHandler(audit)

    logging.getLogger("psycopg").setLevel(logging.WARNING)
    return root
