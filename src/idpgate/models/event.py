"""Lifecycle event view over a raw identity-provider trigger payload.

The identity provider owns the payload dict.  :class:`LifecycleEvent`
reads and writes straight through to it, so every field the gate does
not touch is returned exactly as received.

Payload shape (relevant keys only)::

    {
        "triggerSource": "PreSignUp_ExternalProvider",
        "request": {"userAttributes": {"email": "alice@example.com"}},
        "response": {"autoConfirmUser": false, "autoVerifyEmail": false},
    }
"""

from __future__ import annotations

from typing import Any

from idpgate.core.types import TriggerSource


class LifecycleEvent:
    """Mutable view of one lifecycle trigger payload."""

    __slots__ = ("payload",)

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload

    @classmethod
    def build(
        cls,
        trigger_source: str,
        email: str | None = None,
        **attributes: str,
    ) -> LifecycleEvent:
        """Construct a minimal pre-sign-up payload (tests, CLI)."""
        user_attributes = dict(attributes)
        if email is not None:
            user_attributes["email"] = email
        return cls(
            {
                "triggerSource": trigger_source,
                "request": {"userAttributes": user_attributes},
                "response": {
                    "autoConfirmUser": False,
                    "autoVerifyEmail": False,
                    "autoVerifyPhone": False,
                },
            },
        )

    # -- request side ------------------------------------------------------

    @property
    def trigger_source(self) -> str:
        return self.payload.get("triggerSource", "")

    @property
    def recognized_source(self) -> TriggerSource | None:
        """The trigger source as a :class:`TriggerSource`, or ``None``."""
        try:
            return TriggerSource(self.trigger_source)
        except ValueError:
            return None

    @property
    def user_attributes(self) -> dict[str, Any]:
        request = self.payload.get("request") or {}
        return request.get("userAttributes") or {}

    @property
    def email(self) -> str | None:
        return self.user_attributes.get("email")

    # -- response side -----------------------------------------------------

    @property
    def response(self) -> dict[str, Any]:
        if self.payload.get("response") is None:
            self.payload["response"] = {}
        return self.payload["response"]

    @property
    def auto_confirm_user(self) -> bool:
        return bool(self.response.get("autoConfirmUser", False))

    @property
    def auto_verify_email(self) -> bool:
        return bool(self.response.get("autoVerifyEmail", False))

    def confirm(self) -> None:
        """Mark the account as pre-confirmed with a pre-verified email."""
        self.response["autoConfirmUser"] = True
        self.response["autoVerifyEmail"] = True

    def __repr__(self) -> str:
        return f"<LifecycleEvent trigger_source={self.trigger_source!r}>"
