"""Structured security event logger.

Emits standardized admission and provisioning events for SIEM
integration.  All events are logged to the ``idpgate.security`` logger
with a consistent ``event_id`` field for filtering and alerting.

Email addresses and credentials are masked via
:func:`~idpgate.logging.sanitize.sanitize_for_logs` before emission.
"""

from __future__ import annotations

import logging
from typing import Any

from idpgate.logging.sanitize import mask_email, sanitize_for_logs

security_log = logging.getLogger("idpgate.security")


def _emit(
    event_id: str,
    message: str,
    *args: Any,  # noqa: ANN401
    severity: str = "INFO",
    **extra: Any,  # noqa: ANN401
) -> None:
    """Emit a structured security event."""
    data: dict[str, object] = {
        "event_id": event_id,
        "severity": severity,
    }
    data.update(sanitize_for_logs(extra))
    level = getattr(logging, severity.upper(), logging.INFO)
    security_log.log(level, message, *args, extra=data)


# -- request time -----------------------------------------------------------


def admission_granted(email: str, user_id: str, trigger_source: str) -> None:
    """Log auto-confirmation of a federated sign-up."""
    _emit(
        "idpgate.security.admission_granted",
        "Federated sign-up admitted: %s",
        mask_email(email),
        user_id=user_id,
        trigger_source=trigger_source,
    )


def admission_denied(email: str | None, trigger_source: str) -> None:
    """Log rejection of a federated sign-up with no directory record."""
    _emit(
        "idpgate.security.admission_denied",
        "Federated sign-up rejected, not registered: %s",
        mask_email(email or "-"),
        trigger_source=trigger_source,
        severity="WARNING",
    )


def directory_unavailable(email: str | None, error: str) -> None:
    """Log a directory failure that was resolved as 'not found'."""
    _emit(
        "idpgate.security.directory_unavailable",
        "Directory lookup failed for %s, treating as not registered",
        mask_email(email or "-"),
        error=error,
        severity="ERROR",
    )


# -- provisioning time ------------------------------------------------------


def hook_bound(kind: str, hook_name: str) -> None:
    """Log a lifecycle event binding."""
    _emit(
        "idpgate.security.hook_bound",
        "Lifecycle event %s bound to %s",
        kind,
        hook_name,
    )


def decrypt_granted(hook_name: str, key_id: str) -> None:
    """Log a decrypt grant on the sender key."""
    _emit(
        "idpgate.security.decrypt_granted",
        "Decrypt on sender key %s granted to %s",
        key_id,
        hook_name,
    )
