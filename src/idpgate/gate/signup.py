"""Sign-up gate: admission decisions for pre-sign-up lifecycle events.

Native sign-ups pass through untouched; the identity pool's own
verification flow handles them.  Sign-ups arriving through an external
broker are admitted only when the directory already holds an account
for the email address.  Admitted principals are auto-confirmed with a
pre-verified email: the broker has already verified the address and
the principal never sets a password here, so a pending confirmation
could never be completed.

A directory that fails or times out counts as "not registered".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from idpgate.core.types import TriggerSource
from idpgate.errors import Unregistered
from idpgate.logging import security_events

if TYPE_CHECKING:
    from idpgate.directory.base import UserDirectory
    from idpgate.models.directory import DirectoryRecord
    from idpgate.models.event import LifecycleEvent

log = logging.getLogger(__name__)


class SignUpGate:
    """Decide admission for pre-sign-up events.

    Holds no per-event state: each :meth:`evaluate` touches only the
    event it is given and performs one read against the directory.
    """

    def __init__(self, directory: UserDirectory) -> None:
        self._directory = directory

    def evaluate(self, event: LifecycleEvent) -> LifecycleEvent:
        """Admit, reject, or pass *event* through, and return it.

        Raises
        ------
        Unregistered
            An external-provider sign-up has no directory record.  The
            event's response is left exactly as received.

        """
        source = event.recognized_source
        if source is None:
            log.debug("Ignoring unrecognised trigger source '%s'", event.trigger_source)
            return event

        if source is TriggerSource.SIGN_UP:
            return event

        record = self._lookup(event.email)
        if record is None:
            security_events.admission_denied(event.email, source.value)
            raise Unregistered()

        event.confirm()
        security_events.admission_granted(record.email, record.user_id, source.value)
        return event

    def _lookup(self, email: object) -> DirectoryRecord | None:
        """Return the first directory record for *email*, or ``None``."""
        if not email or not isinstance(email, str):
            return None
        try:
            records = self._directory.query_by_email(email)
        except Exception as exc:  # noqa: BLE001
            security_events.directory_unavailable(email, str(exc))
            return None
        return records[0] if records else None
