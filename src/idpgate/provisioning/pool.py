"""Identity pool blueprint: validate everything, then describe resources.

:class:`PoolBuilder` collects the whole provisioning configuration
(pool settings, optional federation, client redirect sets, the event
routing table) and checks it in one pass before producing any resource
description.  The resulting :class:`PoolDescriptor` lists resources in
creation order; the federated broker, when present, always precedes
the client that references it.

Usage::

    descriptor = PoolBuilder.from_settings(settings).build()
    json.dumps(descriptor.to_dict())
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from idpgate.core.types import RemovalPolicy
from idpgate.errors import ProvisioningError
from idpgate.hooks.registry import EventRouter
from idpgate.provisioning.federation import (
    ClientDescriptor,
    FederatedBroker,
    build_client,
    provision_broker,
)

if TYPE_CHECKING:
    from idpgate.config.settings import ClientSettings, GateSettings, PoolSettings
    from idpgate.provisioning.federation import FederationConfig

log = logging.getLogger(__name__)

POOL_RESOURCE_ID = "user-pool"
DOMAIN_RESOURCE_ID = "domain"
GROUP_RESOURCE_ID = "system-admin-user-pool-group"

_DOMAIN_PREFIX_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_LOCAL_HTTP_PREFIXES = ("http://localhost", "http://127.0.0.1")


def _check_url(url: str, where: str, errors: list[str]) -> None:
    if url.startswith("https://"):
        return
    if url.startswith(_LOCAL_HTTP_PREFIXES):
        return
    errors.append(f"{where}: '{url}' must use https (http allowed only for localhost)")


@dataclass(frozen=True)
class PoolDescriptor:
    """The validated, ordered resource description of one identity pool."""

    pool: dict[str, Any]
    domain: dict[str, Any]
    broker: FederatedBroker | None
    client: ClientDescriptor
    group: dict[str, Any]
    router: EventRouter

    @property
    def resources(self) -> list[dict[str, Any]]:
        """Resources in creation order."""
        ordered = [self.pool, self.domain]
        if self.broker is not None:
            ordered.append(self._redact(self.broker.to_dict()))
        ordered.extend([self.client.to_dict(), self.group])
        return ordered

    def to_dict(self, *, include_secrets: bool = False) -> dict[str, Any]:
        resources = self.resources
        if include_secrets and self.broker is not None:
            resources[2] = self.broker.to_dict()
        return {
            "resources": resources,
            **self.router.to_dict(),
        }

    @staticmethod
    def _redact(data: dict[str, Any]) -> dict[str, Any]:
        return {**data, "client_secret": "[REDACTED]"}


class PoolBuilder:
    """Validate a full pool configuration and build its descriptor."""

    def __init__(
        self,
        pool: PoolSettings,
        client: ClientSettings,
        router: EventRouter,
        federation: FederationConfig | None = None,
    ) -> None:
        self._pool = pool
        self._client = client
        self._router = router
        self._federation = federation

    @classmethod
    def from_settings(cls, settings: GateSettings) -> PoolBuilder:
        router = EventRouter.from_settings(
            settings.triggers,
            sender_key_id=settings.pool.sender_key_id,
        )
        return cls(
            pool=settings.pool,
            client=settings.client,
            router=router,
            federation=settings.federation,
        )

    def validate(self) -> list[str]:
        """Return every problem with the configuration (empty when valid)."""
        errors: list[str] = []

        if not _DOMAIN_PREFIX_RE.match(self._pool.domain_prefix):
            errors.append(
                f"pool.domain_prefix '{self._pool.domain_prefix}' must be lowercase "
                "alphanumerics and hyphens (1-63 chars, no leading/trailing hyphen)",
            )

        for idx, url in enumerate(self._client.callback_urls):
            _check_url(url, f"client.callback_urls[{idx}]", errors)
        for idx, url in enumerate(self._client.logout_urls):
            _check_url(url, f"client.logout_urls[{idx}]", errors)

        if self._federation is not None:
            if not self._client.callback_urls:
                errors.append("client.callback_urls is required when federation is configured")
            if not self._federation.issuer_url.startswith("https://"):
                errors.append(
                    f"federation.issuer_url '{self._federation.issuer_url}' must use https",
                )

        return errors

    def build(self) -> PoolDescriptor:
        """Validate, then produce the descriptor.

        Raises :class:`ProvisioningError` listing every problem before
        any resource is described.
        """
        errors = self.validate()
        if errors:
            body = "\n".join(f"  - {e}" for e in errors)
            msg = f"Provisioning validation failed:\n{body}"
            raise ProvisioningError(msg)

        self._router.freeze()
        namespace = self._pool.namespace
        removal = (
            RemovalPolicy.RETAIN if self._pool.env_type == "prod" else RemovalPolicy.DESTROY
        )

        pool = {
            "id": POOL_RESOURCE_ID,
            "type": "user_pool",
            "depends_on": [],
            "name": f"{namespace}-user-pool",
            "self_sign_up_enabled": False,
            "sign_in_aliases": {"email": True},
            "sign_in_case_sensitive": False,
            "account_recovery": "email_only",
            "auto_verify": {"email": True, "phone": False},
            "custom_sender_key_id": self._pool.sender_key_id,
            "removal_policy": removal.value,
        }
        domain = {
            "id": DOMAIN_RESOURCE_ID,
            "type": "user_pool_domain",
            "depends_on": [POOL_RESOURCE_ID],
            "domain_prefix": self._pool.domain_prefix,
        }

        broker = None
        if self._federation is not None:
            broker = provision_broker(self._federation, POOL_RESOURCE_ID)

        client = build_client(
            name=f"{namespace}-user-pool-client",
            pool_resource_id=POOL_RESOURCE_ID,
            broker=broker,
            callback_urls=self._client.callback_urls,
            logout_urls=self._client.logout_urls,
            generate_secret=self._client.generate_secret,
            prevent_user_existence_errors=self._client.prevent_user_existence_errors,
        )
        group = {
            "id": GROUP_RESOURCE_ID,
            "type": "user_pool_group",
            "depends_on": [POOL_RESOURCE_ID],
            "name": self._pool.admin_group,
            "description": f"{self._pool.admin_group} Group",
            "precedence": 0,
        }

        log.info(
            "Built pool descriptor '%s' (federated=%s, triggers=%d)",
            pool["name"],
            client.is_federated,
            len(self._router),
        )
        return PoolDescriptor(
            pool=pool,
            domain=domain,
            broker=broker,
            client=client,
            group=group,
            router=self._router,
        )
