"""Exception types raised by idpgate.

Only :class:`Unregistered` is ever meant to reach an end user: the
identity provider renders its message on the hosted sign-in page.
Everything else surfaces at provisioning time or is recovered locally.

Usage::

    raise Unregistered()
"""

from __future__ import annotations

UNREGISTERED_MESSAGE = (
    "User is not registered. Please contact your administrator to create an account."
)


class IdpGateError(Exception):
    """Base class for all idpgate errors."""


# ---------------------------------------------------------------------------
# Request time
# ---------------------------------------------------------------------------


class Unregistered(IdpGateError):
    """An externally federated principal has no directory record.

    Propagates to the identity provider as a hard rejection of the
    sign-up attempt.
    """

    def __init__(self, message: str = UNREGISTERED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class DirectoryUnavailable(IdpGateError):
    """The user directory could not answer a lookup (error or timeout)."""


# ---------------------------------------------------------------------------
# Provisioning time
# ---------------------------------------------------------------------------


class ProvisioningError(IdpGateError):
    """Raised when a provisioning configuration violates an invariant."""


class DuplicateBindingError(ProvisioningError):
    """A lifecycle event kind was bound to more than one hook."""

    def __init__(self, kind: str, existing: str, duplicate: str) -> None:
        self.kind = kind
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            f"Event '{kind}' is already bound to hook '{existing}'; "
            f"refusing to bind '{duplicate}'",
        )
