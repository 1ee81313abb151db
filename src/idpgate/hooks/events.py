"""Canonical lifecycle event definitions.

Single source of truth for all known identity-pool lifecycle events,
the trigger slot each one occupies in the pool's hook configuration,
and the conventional route of the hook that serves it.

This module has **zero** internal dependencies; it can be imported
from anywhere without circular import risk.
"""

from __future__ import annotations

from enum import StrEnum


class EventKind(StrEnum):
    # Authentication
    PRE_AUTHENTICATION = "pre-authentication"
    POST_AUTHENTICATION = "post-authentication"
    PRE_TOKEN_GENERATION = "pre-token-generation"
    # Sign-up
    PRE_SIGN_UP = "pre-sign-up"
    POST_CONFIRMATION = "post-confirmation"
    USER_MIGRATION = "user-migration"
    # Messages
    CUSTOM_MESSAGE = "custom-message"
    # Email & SMS third-party senders
    CUSTOM_EMAIL_SENDER = "custom-email-sender"
    CUSTOM_SMS_SENDER = "custom-sms-sender"


EVENT_TRIGGER_MAP: dict[EventKind, str] = {
    EventKind.PRE_AUTHENTICATION: "PreAuthentication",
    EventKind.POST_AUTHENTICATION: "PostAuthentication",
    EventKind.PRE_TOKEN_GENERATION: "PreTokenGeneration",
    EventKind.PRE_SIGN_UP: "PreSignUp",
    EventKind.POST_CONFIRMATION: "PostConfirmation",
    EventKind.USER_MIGRATION: "UserMigration",
    EventKind.CUSTOM_MESSAGE: "CustomMessage",
    EventKind.CUSTOM_EMAIL_SENDER: "CustomEmailSender",
    EventKind.CUSTOM_SMS_SENDER: "CustomSMSSender",
}

DEFAULT_HOOK_ROUTES: dict[EventKind, str] = {
    kind: f"/auth/process-{kind.value.replace('-sign-up', '-signup')}" for kind in EventKind
}

# Hooks that receive encrypted codes and need decrypt on the sender key.
MESSAGE_TRANSFORM_EVENTS: frozenset[EventKind] = frozenset(
    {EventKind.CUSTOM_EMAIL_SENDER, EventKind.CUSTOM_SMS_SENDER},
)

KNOWN_EVENTS: frozenset[str] = frozenset(kind.value for kind in EventKind)
