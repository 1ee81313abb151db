"""Tests for idpgate.config.gate_config — loading, validation, singleton."""

from __future__ import annotations

import json
import logging

import pytest

from idpgate.config.gate_config import (
    ConfigValidationError,
    GateConfig,
    _resolve_env_vars,
    get_config,
)
from idpgate.core.types import AttributeRequestMethod


class TestLoading:
    def test_minimal_config(self, tmp_config_file):
        cfg = GateConfig(config_file=tmp_config_file)
        settings = cfg.settings
        assert settings.pool.namespace == "genomics-dev"
        assert settings.pool.domain_prefix == "genomics-dev"
        assert settings.federation is None
        assert settings.directory.backend == "memory"
        assert settings.directory.records[0].email == "alice@example.com"
        assert settings.logging.format == "json"

    def test_json_config(self, write_config, minimal_config_data, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(minimal_config_data), encoding="utf-8")
        assert GateConfig(config_file=path).settings.pool.namespace == "genomics-dev"

    def test_singleton_set(self, tmp_config_file):
        cfg = GateConfig(config_file=tmp_config_file)
        assert get_config() is cfg

    def test_get_before_init_raises(self):
        with pytest.raises(RuntimeError, match="not initialised"):
            get_config()

    def test_dotted_get(self, tmp_config_file):
        cfg = GateConfig(config_file=tmp_config_file)
        assert cfg.get("pool.namespace") == "genomics-dev"
        assert cfg.get("pool.missing", default="x") == "x"

    def test_federation_parsed(self, write_config, federated_config_data):
        settings = GateConfig(config_file=write_config(federated_config_data)).settings
        assert settings.federation.name == "corp-oidc"
        assert settings.federation.attribute_request_method is AttributeRequestMethod.POST
        assert settings.client.callback_urls == ("https://app.example.com/signin",)

    def test_disabled_federation_is_absent(self, write_config, federated_config_data):
        federated_config_data["federation"]["enabled"] = False
        settings = GateConfig(config_file=write_config(federated_config_data)).settings
        assert settings.federation is None

    def test_reload_settings(self, write_config, minimal_config_data):
        path = write_config(minimal_config_data)
        cfg = GateConfig(config_file=path)
        minimal_config_data["pool"]["region"] = "eu-west-1"
        write_config(minimal_config_data)
        assert cfg.reload_settings().pool.region == "eu-west-1"
        assert cfg.settings.pool.region == "us-east-1"


class TestEnvResolution:
    def test_env_var_substituted(self, write_config, federated_config_data, monkeypatch):
        monkeypatch.setenv("OIDC_SECRET", "from-env")
        federated_config_data["federation"]["client_secret"] = "${OIDC_SECRET}"
        settings = GateConfig(config_file=write_config(federated_config_data)).settings
        assert settings.federation.client_secret == "from-env"

    def test_default_used(self, monkeypatch):
        monkeypatch.delenv("GATE_LEVEL", raising=False)
        data = {"logging": {"level": "${GATE_LEVEL:-DEBUG}"}}
        _resolve_env_vars(data)
        assert data["logging"]["level"] == "DEBUG"

    def test_missing_var_without_default(self, monkeypatch):
        monkeypatch.delenv("GATE_NOPE", raising=False)
        with pytest.raises(ConfigValidationError, match="GATE_NOPE"):
            _resolve_env_vars({"pool": {"namespace": "${GATE_NOPE}"}})

    def test_lists_resolved(self, monkeypatch):
        monkeypatch.setenv("APP_URL", "https://app.example.com/cb")
        data = {"client": {"callback_urls": ["${APP_URL}"]}}
        _resolve_env_vars(data)
        assert data["client"]["callback_urls"] == ["https://app.example.com/cb"]


class TestSchemaValidation:
    def test_missing_pool(self, write_config):
        with pytest.raises(ConfigValidationError, match="pool"):
            GateConfig(config_file=write_config({"directory": {}}))

    def test_unknown_top_level_key(self, write_config, minimal_config_data):
        minimal_config_data["server"] = {}
        with pytest.raises(ConfigValidationError, match="server"):
            GateConfig(config_file=write_config(minimal_config_data))

    def test_bad_log_format(self, write_config, minimal_config_data):
        minimal_config_data["logging"] = {"format": "xml"}
        with pytest.raises(ConfigValidationError, match="xml"):
            GateConfig(config_file=write_config(minimal_config_data))

    def test_non_mapping_file(self, write_config, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="mapping"):
            GateConfig(config_file=path)


class TestCrossFieldChecks:
    def test_federation_requires_callback(self, write_config, federated_config_data):
        federated_config_data["client"]["callback_urls"] = []
        with pytest.raises(ConfigValidationError, match="callback_urls is required"):
            GateConfig(config_file=write_config(federated_config_data))

    def test_http_issuer_rejected(self, write_config, federated_config_data):
        federated_config_data["federation"]["issuer_url"] = "http://issuer.example.com"
        with pytest.raises(ConfigValidationError, match="issuer_url"):
            GateConfig(config_file=write_config(federated_config_data))

    def test_http_redirect_rejected(self, write_config, federated_config_data):
        federated_config_data["client"]["logout_urls"] = ["http://app.example.com/out"]
        with pytest.raises(ConfigValidationError, match="logout_urls"):
            GateConfig(config_file=write_config(federated_config_data))

    def test_duplicate_trigger_event(self, write_config, minimal_config_data):
        minimal_config_data["triggers"] = [
            {"event": "pre-sign-up", "hook": {"name": "a"}},
            {"event": "pre-sign-up", "hook": {"name": "b"}},
        ]
        with pytest.raises(ConfigValidationError, match="already bound"):
            GateConfig(config_file=write_config(minimal_config_data))

    def test_disabled_duplicate_allowed(self, write_config, minimal_config_data):
        minimal_config_data["triggers"] = [
            {"event": "pre-sign-up", "hook": {"name": "a"}},
            {"event": "pre-sign-up", "hook": {"name": "b"}, "enabled": False},
        ]
        settings = GateConfig(config_file=write_config(minimal_config_data)).settings
        assert len(settings.triggers) == 2

    def test_unknown_trigger_event(self, write_config, minimal_config_data):
        minimal_config_data["triggers"] = [{"event": "post-sign-out", "hook": {"name": "a"}}]
        with pytest.raises(ConfigValidationError, match="unknown event"):
            GateConfig(config_file=write_config(minimal_config_data))

    def test_postgres_requires_dsn(self, write_config, minimal_config_data):
        minimal_config_data["directory"] = {"backend": "postgres"}
        with pytest.raises(ConfigValidationError, match="dsn"):
            GateConfig(config_file=write_config(minimal_config_data))

    def test_errors_collected(self, write_config, federated_config_data):
        federated_config_data["client"]["callback_urls"] = []
        federated_config_data["directory"] = {"backend": "postgres"}
        with pytest.raises(ConfigValidationError) as exc_info:
            GateConfig(config_file=write_config(federated_config_data))
        assert len(exc_info.value.errors) == 2

    def test_empty_memory_directory_warns(self, write_config, minimal_config_data, caplog):
        minimal_config_data["directory"] = {"backend": "memory"}
        with caplog.at_level(logging.WARNING, logger="idpgate.config.gate_config"):
            GateConfig(config_file=write_config(minimal_config_data))
        assert "every federated sign-up will be rejected" in caplog.text

    def test_sender_trigger_without_key_warns(self, write_config, minimal_config_data, caplog):
        minimal_config_data["triggers"] = [
            {"event": "custom-sms-sender", "hook": {"name": "sms"}},
        ]
        with caplog.at_level(logging.WARNING, logger="idpgate.config.gate_config"):
            GateConfig(config_file=write_config(minimal_config_data))
        assert "sender_key_id" in caplog.text
