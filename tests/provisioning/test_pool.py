"""Tests for idpgate.provisioning.pool — PoolBuilder and PoolDescriptor."""

from __future__ import annotations

import pytest

from idpgate.config.settings import build_settings
from idpgate.errors import DuplicateBindingError, ProvisioningError
from idpgate.hooks.events import EventKind
from idpgate.provisioning.pool import PoolBuilder


def _build(data: dict):
    return PoolBuilder.from_settings(build_settings(data)).build()


class TestNativeOnlyPool:
    def test_client_has_no_oauth_and_native_provider(self, minimal_config_data):
        descriptor = _build(minimal_config_data)
        client = descriptor.to_dict()["resources"][2]
        assert client["type"] == "user_pool_client"
        assert client["supported_providers"] == ["COGNITO"]
        assert "oauth" not in client

    def test_no_broker_resource(self, minimal_config_data):
        descriptor = _build(minimal_config_data)
        types = [r["type"] for r in descriptor.resources]
        assert "oidc_identity_provider" not in types
        assert descriptor.broker is None

    def test_pool_defaults(self, minimal_config_data):
        pool = _build(minimal_config_data).pool
        assert pool["name"] == "genomics-dev-user-pool"
        assert pool["self_sign_up_enabled"] is False
        assert pool["sign_in_case_sensitive"] is False
        assert pool["removal_policy"] == "destroy"

    def test_prod_retains_pool(self, minimal_config_data):
        minimal_config_data["pool"]["env_type"] = "prod"
        assert _build(minimal_config_data).pool["removal_policy"] == "retain"

    def test_admin_group(self, minimal_config_data):
        group = _build(minimal_config_data).group
        assert group["name"] == "SystemAdmin"
        assert group["precedence"] == 0


class TestFederatedPool:
    def test_resources_ordered_broker_before_client(self, federated_config_data):
        resources = _build(federated_config_data).resources
        ids = [r["id"] for r in resources]
        assert ids.index("federated-oidc") < ids.index("client")
        assert ids[0] == "user-pool"

    def test_client_depends_on_broker(self, federated_config_data):
        descriptor = _build(federated_config_data)
        assert "federated-oidc" in descriptor.client.depends_on
        assert descriptor.client.supported_providers == ("COGNITO", "corp-oidc")

    def test_secret_redacted_by_default(self, federated_config_data):
        broker = _build(federated_config_data).to_dict()["resources"][2]
        assert broker["client_secret"] == "[REDACTED]"

    def test_secret_included_on_request(self, federated_config_data):
        data = _build(federated_config_data).to_dict(include_secrets=True)
        assert data["resources"][2]["client_secret"] == "s3cr3t-value"

    def test_missing_callback_fails_validation(self, federated_config_data):
        federated_config_data["client"]["callback_urls"] = []
        with pytest.raises(ProvisioningError, match="callback_urls"):
            _build(federated_config_data)


class TestValidation:
    def test_errors_collected_before_building(self, federated_config_data):
        federated_config_data["pool"]["domain_prefix"] = "Bad_Prefix"
        federated_config_data["client"]["logout_urls"] = ["http://app.example.com/out"]
        builder = PoolBuilder.from_settings(build_settings(federated_config_data))
        errors = builder.validate()
        assert len(errors) == 2
        with pytest.raises(ProvisioningError, match="domain_prefix"):
            builder.build()

    def test_localhost_http_allowed(self, federated_config_data):
        federated_config_data["client"]["callback_urls"] = ["http://localhost:3000/signin"]
        assert PoolBuilder.from_settings(build_settings(federated_config_data)).validate() == []

    def test_duplicate_triggers_rejected(self, minimal_config_data):
        minimal_config_data["triggers"] = [
            {"event": "pre-sign-up", "hook": {"name": "a"}},
            {"event": "pre-sign-up", "hook": {"name": "b"}},
        ]
        with pytest.raises(DuplicateBindingError):
            PoolBuilder.from_settings(build_settings(minimal_config_data))


class TestTriggers:
    def test_triggers_and_grants_exported(self, minimal_config_data):
        minimal_config_data["pool"]["sender_key_id"] = "key-1"
        minimal_config_data["triggers"] = [
            {"event": "pre-sign-up", "hook": {"function_arn": "arn:fn:pre"}},
            {"event": "custom-email-sender", "hook": {"name": "email", "function_arn": "arn:fn:e"}},
        ]
        descriptor = _build(minimal_config_data)
        data = descriptor.to_dict()
        assert data["triggers"] == {"PreSignUp": "arn:fn:pre", "CustomEmailSender": "arn:fn:e"}
        assert data["decrypt_grants"][0]["grantee"] == "arn:fn:e"
        assert descriptor.router.is_frozen
        assert descriptor.router.hook_for(EventKind.PRE_SIGN_UP).name == "/auth/process-pre-signup"
