"""Tests for idpgate.provisioning.federation — broker and client descriptors."""

from __future__ import annotations

import pytest

from idpgate.core.types import NATIVE_PROVIDER, AttributeRequestMethod
from idpgate.errors import ProvisioningError
from idpgate.provisioning.federation import (
    BROKER_RESOURCE_ID,
    FederationConfig,
    build_client,
    provision_broker,
)


@pytest.fixture()
def federation() -> FederationConfig:
    return FederationConfig(
        name="corp-oidc",
        client_id="client-123",
        client_secret="s3cr3t-value",
        issuer_url="https://issuer.example.com/pool",
    )


class TestFederationConfig:
    def test_secret_hidden_from_repr(self, federation):
        assert "s3cr3t-value" not in repr(federation)

    def test_defaults(self, federation):
        assert federation.attribute_request_method is AttributeRequestMethod.POST
        assert dict(federation.attribute_mapping)["email"] == "email"


class TestProvisionBroker:
    def test_broker_depends_on_pool(self, federation):
        broker = provision_broker(federation, "user-pool")
        data = broker.to_dict()
        assert data["id"] == BROKER_RESOURCE_ID
        assert data["depends_on"] == ["user-pool"]
        assert data["issuer_url"] == "https://issuer.example.com/pool"

    def test_http_issuer_rejected(self):
        config = FederationConfig(
            name="x",
            client_id="c",
            client_secret="s",
            issuer_url="http://issuer.example.com",
        )
        with pytest.raises(ProvisioningError, match="https"):
            provision_broker(config, "user-pool")


class TestBuildClientNative:
    def test_native_only_provider(self):
        client = build_client("pool-client", "user-pool", broker=None)
        assert client.supported_providers == (NATIVE_PROVIDER,)

    def test_no_oauth_block(self):
        client = build_client(
            "pool-client",
            "user-pool",
            broker=None,
            callback_urls=("https://app.example.com/cb",),
        )
        assert client.oauth is None
        assert client.is_federated is False
        assert "oauth" not in client.to_dict()

    def test_no_broker_reference(self):
        client = build_client("pool-client", "user-pool", broker=None)
        assert client.depends_on == ("user-pool",)
        assert BROKER_RESOURCE_ID not in client.to_dict()["depends_on"]


class TestBuildClientFederated:
    def test_supports_native_and_broker(self, federation):
        broker = provision_broker(federation, "user-pool")
        client = build_client(
            "pool-client",
            "user-pool",
            broker=broker,
            callback_urls=("https://app.example.com/cb",),
            logout_urls=("https://app.example.com/out",),
        )
        assert client.supported_providers == (NATIVE_PROVIDER, "corp-oidc")

    def test_oauth_block(self, federation):
        broker = provision_broker(federation, "user-pool")
        client = build_client(
            "pool-client",
            "user-pool",
            broker=broker,
            callback_urls=("https://app.example.com/cb",),
            logout_urls=("https://app.example.com/out",),
        )
        oauth = client.to_dict()["oauth"]
        assert oauth["flows"] == ["code"]
        assert oauth["scopes"] == ["openid", "email", "profile"]
        assert oauth["callback_urls"] == ["https://app.example.com/cb"]
        assert oauth["logout_urls"] == ["https://app.example.com/out"]

    def test_client_ordered_after_broker(self, federation):
        broker = provision_broker(federation, "user-pool")
        client = build_client(
            "pool-client",
            "user-pool",
            broker=broker,
            callback_urls=("https://app.example.com/cb",),
        )
        assert broker.resource_id in client.depends_on

    def test_missing_callback_rejected(self, federation):
        broker = provision_broker(federation, "user-pool")
        with pytest.raises(ProvisioningError, match="callback URL"):
            build_client("pool-client", "user-pool", broker=broker)
