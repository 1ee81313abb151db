"""Sensitive data sanitization for log output.

Provides :func:`sanitize_for_logs` which masks email addresses and
redacts credential fields (client secrets, DSNs) from data structures
before they are written to logs.  Enough of each email is kept to
correlate log lines without recording the full address.
"""

from __future__ import annotations

import re
from typing import Any

# Keys whose values are credentials and are never logged
_SECRET_FIELDS = frozenset({"client_secret", "clientSecret", "dsn", "password"})

_EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def mask_email(email: object) -> str:
    """Keep the first character of the local part and the whole domain.

    ``alice@example.com`` becomes ``a***@example.com``.
    """

    def _mask(m) -> str:
        return f"{m.group(1)[:1]}***@{m.group(2)}"

    return _EMAIL_RE.sub(_mask, str(email))


def sanitize_for_logs(data: Any) -> Any:
    """Recursively sanitize sensitive material in *data*.

    Handles dicts (credential keys), lists, tuples and plain strings.
    Everything else passes through unchanged.
    """
    if isinstance(data, dict):
        return {
            k: "[REDACTED]" if k in _SECRET_FIELDS else sanitize_for_logs(v)
            for k, v in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(sanitize_for_logs(item) for item in data)

    if isinstance(data, str):
        if "@" in data:
            return mask_email(data)
        return data

    return data
