"""Lifecycle hook routing for the identity pool.

Public API::

    from idpgate.hooks import EventKind, EventRouter, HookHandle

    router = EventRouter(sender_key_id="key-1")
    router.bind(EventKind.PRE_SIGN_UP, HookHandle("pre-signup", "arn:..."))
"""

from idpgate.hooks.base import HookHandle
from idpgate.hooks.events import KNOWN_EVENTS, EventKind
from idpgate.hooks.registry import EventRouter

__all__ = ["KNOWN_EVENTS", "EventKind", "EventRouter", "HookHandle"]
