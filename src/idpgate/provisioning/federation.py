"""Federated identity broker and identity-pool client descriptors.

The client's shape depends on whether a broker is configured:

* With a broker, the client supports the native and the federated
  provider, enables the authorization-code OAuth flow and advertises
  the callback and logout URL sets.  The client descriptor can only be
  built from a :class:`FederatedBroker`, so the broker always exists
  first and the client records an explicit dependency on it.
* Without a broker, the client supports only the native provider and
  carries no OAuth block at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from idpgate.core.types import (
    NATIVE_PROVIDER,
    AttributeRequestMethod,
    OAuthFlow,
    OAuthScope,
)
from idpgate.errors import ProvisioningError

DEFAULT_SCOPES: tuple[OAuthScope, ...] = (
    OAuthScope.OPENID,
    OAuthScope.EMAIL,
    OAuthScope.PROFILE,
)

BROKER_RESOURCE_ID = "federated-oidc"
CLIENT_RESOURCE_ID = "client"


@dataclass(frozen=True)
class FederationConfig:
    """Credentials enabling one external OIDC identity broker."""

    name: str
    client_id: str
    client_secret: str = field(repr=False)
    issuer_url: str
    attribute_mapping: tuple[tuple[str, str], ...] = (
        ("email", "email"),
        ("family_name", "family_name"),
        ("given_name", "given_name"),
    )
    attribute_request_method: AttributeRequestMethod = AttributeRequestMethod.POST


@dataclass(frozen=True)
class FederatedBroker:
    """A provisioned broker resource, referenced by the client."""

    config: FederationConfig
    pool_resource_id: str
    resource_id: str = BROKER_RESOURCE_ID

    @property
    def provider_name(self) -> str:
        return self.config.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.resource_id,
            "type": "oidc_identity_provider",
            "depends_on": [self.pool_resource_id],
            "name": self.config.name,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "issuer_url": self.config.issuer_url,
            "attribute_mapping": dict(self.config.attribute_mapping),
            "attribute_request_method": self.config.attribute_request_method.value,
        }


@dataclass(frozen=True)
class OAuthBlock:
    flows: tuple[OAuthFlow, ...]
    scopes: tuple[OAuthScope, ...]
    callback_urls: tuple[str, ...]
    logout_urls: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "flows": [f.value for f in self.flows],
            "scopes": [s.value for s in self.scopes],
            "callback_urls": list(self.callback_urls),
            "logout_urls": list(self.logout_urls),
        }


@dataclass(frozen=True)
class ClientDescriptor:
    """Identity pool client as handed to the provisioning collaborator."""

    name: str
    supported_providers: tuple[str, ...]
    generate_secret: bool
    prevent_user_existence_errors: bool
    oauth: OAuthBlock | None = None
    depends_on: tuple[str, ...] = ()
    resource_id: str = CLIENT_RESOURCE_ID

    @property
    def is_federated(self) -> bool:
        return self.oauth is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.resource_id,
            "type": "user_pool_client",
            "depends_on": list(self.depends_on),
            "name": self.name,
            "supported_providers": list(self.supported_providers),
            "generate_secret": self.generate_secret,
            "prevent_user_existence_errors": self.prevent_user_existence_errors,
            "auth_flows": {"user_srp": True},
        }
        if self.oauth is not None:
            data["oauth"] = self.oauth.to_dict()
        return data


def provision_broker(config: FederationConfig, pool_resource_id: str) -> FederatedBroker:
    """Create the broker resource for *config* inside the given pool."""
    if not config.issuer_url.startswith("https://"):
        msg = f"Federation issuer_url must use https (got '{config.issuer_url}')"
        raise ProvisioningError(msg)
    return FederatedBroker(config=config, pool_resource_id=pool_resource_id)


def build_client(  # noqa: PLR0913
    name: str,
    pool_resource_id: str,
    broker: FederatedBroker | None,
    callback_urls: tuple[str, ...] = (),
    logout_urls: tuple[str, ...] = (),
    generate_secret: bool = True,  # noqa: FBT001, FBT002
    prevent_user_existence_errors: bool = True,  # noqa: FBT001, FBT002
) -> ClientDescriptor:
    """Build the client descriptor for an optional, already-created broker.

    Raises :class:`ProvisioningError` when a broker is given without any
    callback URL, since the authorization-code flow cannot complete.
    """
    if broker is None:
        return ClientDescriptor(
            name=name,
            supported_providers=(NATIVE_PROVIDER,),
            generate_secret=generate_secret,
            prevent_user_existence_errors=prevent_user_existence_errors,
            depends_on=(pool_resource_id,),
        )

    if not callback_urls:
        msg = f"Federated client '{name}' requires at least one callback URL"
        raise ProvisioningError(msg)

    return ClientDescriptor(
        name=name,
        supported_providers=(NATIVE_PROVIDER, broker.provider_name),
        generate_secret=generate_secret,
        prevent_user_existence_errors=prevent_user_existence_errors,
        oauth=OAuthBlock(
            flows=(OAuthFlow.AUTHORIZATION_CODE,),
            scopes=DEFAULT_SCOPES,
            callback_urls=tuple(callback_urls),
            logout_urls=tuple(logout_urls),
        ),
        depends_on=(pool_resource_id, broker.resource_id),
    )
