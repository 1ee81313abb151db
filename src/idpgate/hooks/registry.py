"""Event router: the fixed lifecycle event -> hook association table.

Built once at provisioning time from configuration and frozen before it
is exported.  Each :class:`EventKind` maps to at most one
:class:`HookHandle`; a second binding for the same kind is a
configuration error, never a silent overwrite.

Hooks bound to a message-transform event (custom email / SMS sender)
are granted decrypt on the deployment's sender key, when one is
configured.  Grants are a set, so granting twice is harmless.

Usage::

    from idpgate.hooks.registry import EventRouter

    router = EventRouter.from_settings(settings.triggers, settings.pool.sender_key_id)
    router.hook_for(EventKind.PRE_SIGN_UP)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from idpgate.errors import DuplicateBindingError, ProvisioningError
from idpgate.hooks.base import HookHandle
from idpgate.hooks.events import EVENT_TRIGGER_MAP, MESSAGE_TRANSFORM_EVENTS, EventKind
from idpgate.logging import security_events

if TYPE_CHECKING:
    from idpgate.config.settings import TriggerEntrySettings

log = logging.getLogger(__name__)


def _coerce_kind(kind: EventKind | str) -> EventKind:
    try:
        return EventKind(kind)
    except ValueError:
        msg = f"Unknown lifecycle event '{kind}'. Known events: {sorted(e.value for e in EventKind)}"
        raise ValueError(msg) from None


class EventRouter:
    """Registry of lifecycle event bindings and sender-key grants.

    Parameters
    ----------
    sender_key_id:
        Identifier of the decrypt-capable sender key, or ``None`` when
        the deployment has no custom sender key.

    """

    def __init__(self, sender_key_id: str | None = None) -> None:
        self._sender_key_id = sender_key_id
        self._bindings: dict[EventKind, HookHandle] = {}
        self._decrypt_grants: set[HookHandle] = set()
        self._frozen = False

    @classmethod
    def from_settings(
        cls,
        triggers: Iterable[TriggerEntrySettings],
        sender_key_id: str | None = None,
    ) -> EventRouter:
        """Build and freeze a router from the ``triggers`` config section.

        Disabled entries bind nothing.  The full set is validated before
        any binding takes effect.
        """
        router = cls(sender_key_id=sender_key_id)
        pairs: list[tuple[EventKind | str, HookHandle | None]] = []
        for entry in triggers:
            hook = HookHandle(name=entry.hook_name, function_arn=entry.function_arn)
            if not entry.enabled:
                log.debug("Trigger for '%s' is disabled, skipping", entry.event)
                hook = None
            pairs.append((entry.event, hook))
        router.bind_all(pairs)
        router.freeze()
        return router

    # -- read access -------------------------------------------------------

    @property
    def sender_key_id(self) -> str | None:
        return self._sender_key_id

    @property
    def bindings(self) -> Mapping[EventKind, HookHandle]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._bindings)

    @property
    def decrypt_grants(self) -> frozenset[HookHandle]:
        return frozenset(self._decrypt_grants)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def hook_for(self, kind: EventKind | str) -> HookHandle | None:
        """Return the hook bound to *kind*, or ``None`` for default behaviour."""
        return self._bindings.get(_coerce_kind(kind))

    # -- binding -----------------------------------------------------------

    def bind(self, kind: EventKind | str, hook: HookHandle | None) -> None:
        """Bind *hook* to lifecycle event *kind*.

        ``hook=None`` is an explicit no-op: the identity pool's default
        behaviour governs that event.

        Raises
        ------
        DuplicateBindingError
            *kind* is already bound.
        ProvisioningError
            The router has been frozen.
        ValueError
            *kind* is not a known lifecycle event.

        """
        event = _coerce_kind(kind)
        if hook is None:
            log.debug("No hook for '%s', default behaviour applies", event)
            return
        self._check_mutable()
        existing = self._bindings.get(event)
        if existing is not None:
            raise DuplicateBindingError(event.value, existing.name, hook.name)

        self._bindings[event] = hook
        security_events.hook_bound(event.value, hook.name)

        if self._sender_key_id and event in MESSAGE_TRANSFORM_EVENTS:
            self.grant_decrypt(hook)

    def bind_all(self, pairs: Iterable[tuple[EventKind | str, HookHandle | None]]) -> None:
        """Bind every ``(kind, hook)`` pair, or none of them.

        Unknown kinds and duplicate kinds (within *pairs* or against
        existing bindings) are rejected before anything is bound.
        """
        self._check_mutable()
        staged: dict[EventKind, HookHandle] = {}
        resolved: list[tuple[EventKind, HookHandle | None]] = []
        for kind, hook in pairs:
            event = _coerce_kind(kind)
            resolved.append((event, hook))
            if hook is None:
                continue
            existing = staged.get(event) or self._bindings.get(event)
            if existing is not None:
                raise DuplicateBindingError(event.value, existing.name, hook.name)
            staged[event] = hook

        for event, hook in resolved:
            self.bind(event, hook)

    def grant_decrypt(self, hook: HookHandle) -> None:
        """Grant *hook* decrypt on the sender key.  Idempotent."""
        if not self._sender_key_id:
            msg = "No sender key configured; cannot grant decrypt"
            raise ProvisioningError(msg)
        if hook in self._decrypt_grants:
            return
        self._decrypt_grants.add(hook)
        security_events.decrypt_granted(hook.name, self._sender_key_id)

    def freeze(self) -> None:
        """Make the table immutable.  Safe to call multiple times."""
        if not self._frozen:
            self._frozen = True
            log.info(
                "Event routing table frozen: %d binding(s), %d decrypt grant(s)",
                len(self._bindings),
                len(self._decrypt_grants),
            )

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "Event routing table is frozen; bindings are fixed at provisioning"
            raise ProvisioningError(msg)

    # -- export ------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Describe the table as the pool's trigger configuration."""
        triggers = {
            EVENT_TRIGGER_MAP[kind]: hook.function_arn
            for kind, hook in sorted(self._bindings.items(), key=lambda kv: kv[0].value)
        }
        grants = [
            {"key_id": self._sender_key_id, "grantee": hook.function_arn, "action": "decrypt"}
            for hook in sorted(self._decrypt_grants, key=lambda h: h.name)
        ]
        return {"triggers": triggers, "decrypt_grants": grants}

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"<EventRouter bindings={len(self._bindings)} frozen={self._frozen}>"
