"""idpgate configuration loader.

Lifecycle::

    # 1. The CLI or trigger handler creates the singleton (once, at startup)
    GateConfig(config_file="/etc/idpgate/config.yaml")

    # 2. Any module retrieves it afterwards
    from idpgate.config import get_config
    cfg = get_config()
    cfg.settings.pool.namespace  # typed access

    # 3. Dynamic access
    cfg.get("directory.timeout_seconds", default=3)
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from idpgate.config.settings import GateSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_LOCAL_HTTP_PREFIXES = ("http://localhost", "http://127.0.0.1")

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton reference
# ---------------------------------------------------------------------------
_instance: GateConfig | None = None


def get_config() -> GateConfig:
    """Return the initialised configuration singleton.

    Raises :class:`RuntimeError` if :class:`GateConfig` has not been
    created yet.
    """
    if _instance is None:
        msg = (
            "Configuration not initialised. "
            "GateConfig must be created with config_file= before calling get_config()."
        )
        raise RuntimeError(msg)
    return _instance


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when schema or cross-field validation finds problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


def _read_file(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:  # noqa: PTH123
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping at the top level"
        raise ConfigValidationError([msg])
    return data


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class GateConfig:
    """Central configuration for idpgate.

    The JSON schema is bundled at ``config/schema.json``; callers supply
    only ``config_file``.  After construction the typed settings tree is
    available at :pyattr:`settings` and the raw dict via :pyattr:`data`
    / :pymeth:`get`.
    """

    def __init__(self, *, config_file: str | Path) -> None:
        global _instance  # noqa: PLW0603

        path = Path(config_file)
        self._data = self._load(path)
        self._validate_schema()
        self.additional_checks()
        try:
            self._settings: GateSettings = build_settings(self._data)
        except (KeyError, ValueError) as exc:
            raise ConfigValidationError([str(exc)]) from exc
        _instance = self

    # -- lifecycle ----------------------------------------------------------

    @staticmethod
    def _load(path: Path) -> dict:
        """Load config file then resolve ``${VAR}`` env-var references.

        Runs env-var resolution **before** schema validation so that
        substituted values (e.g. ``${LOG_LEVEL:-INFO}``) are checked
        against enum constraints in the schema.
        """
        data = _read_file(path)
        _resolve_env_vars(data)
        data["_source"] = str(path)
        return data

    def _validate_schema(self) -> None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:  # noqa: PTH123
            schema = json.load(f)
        validator = Draft202012Validator(schema)
        errors = [
            f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in sorted(validator.iter_errors(self._data), key=lambda e: list(e.path))
        ]
        if errors:
            raise ConfigValidationError(errors)

    # -- access -------------------------------------------------------------

    @property
    def data(self) -> dict:
        return self._data

    @property
    def settings(self) -> GateSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    def get(self, dotted: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return the raw value at a dot-separated path, or *default*."""
        node: Any = self._data
        for part in dotted.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # -- cross-field validation ---------------------------------------------

    def additional_checks(self) -> None:
        """Semantic & cross-field validation, run after schema validation."""
        errors: list[str] = []
        warnings: list[str] = []

        federation = self._data.get("federation") or {}
        client = self._data.get("client") or {}
        directory = self._data.get("directory") or {}
        pool = self._data.get("pool") or {}

        # -- federation / client --
        federated = bool(federation) and federation.get("enabled", True)
        if federated:
            if not client.get("callback_urls"):
                errors.append(
                    "client.callback_urls is required when federation is configured",
                )
            if not client.get("logout_urls"):
                warnings.append(
                    "federation is configured but client.logout_urls is empty; "
                    "sign-out will not redirect",
                )
            issuer = federation.get("issuer_url", "")
            if not issuer.startswith("https://"):
                errors.append(f"federation.issuer_url must use https (got '{issuer}')")
        elif client.get("callback_urls") or client.get("logout_urls"):
            warnings.append(
                "client redirect URLs are set but federation is not configured; "
                "they will not be advertised",
            )

        for key in ("callback_urls", "logout_urls"):
            for idx, url in enumerate(client.get(key, [])):
                if not url.startswith("https://") and not url.startswith(_LOCAL_HTTP_PREFIXES):
                    errors.append(
                        f"client.{key}[{idx}] '{url}' must use https "
                        "(http allowed only for localhost)",
                    )

        # -- triggers --
        seen: dict[str, int] = {}
        for idx, entry in enumerate(self._data.get("triggers", [])):
            if not entry.get("enabled", True):
                continue
            event = entry.get("event", "")
            if event in seen:
                errors.append(
                    f"triggers[{idx}].event '{event}' is already bound by triggers[{seen[event]}]",
                )
            else:
                seen[event] = idx

        sender_events = {"custom-email-sender", "custom-sms-sender"}
        if sender_events & seen.keys() and not pool.get("sender_key_id"):
            warnings.append(
                "a custom sender trigger is configured but pool.sender_key_id is "
                "not set; the sender hook will not be able to decrypt codes",
            )

        # -- directory --
        if directory.get("backend") == "postgres" and not directory.get("dsn"):
            errors.append("directory.dsn is required when directory.backend is 'postgres'")
        if directory.get("backend", "memory") == "memory" and not directory.get("records"):
            warnings.append(
                "directory.backend is 'memory' with no records; every federated "
                "sign-up will be rejected",
            )

        for w in warnings:
            log.warning("Config warning: %s", w)

        if errors:
            raise ConfigValidationError(errors)

    # -- helpers ------------------------------------------------------------

    def reload_settings(self) -> GateSettings:
        """Re-read the config file and rebuild settings.

        Does not reset the singleton.  Re-reads the file, resolves env
        vars, and returns a fresh :class:`GateSettings` tree.
        """
        source_file = self._data.get("_source", "")
        if not source_file:
            msg = "Cannot reload: no source file recorded"
            raise RuntimeError(msg)
        return build_settings(self._load(Path(source_file)))

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        global _instance  # noqa: PLW0603
        _instance = None

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        source = self._data.get("_source", "?")
        return f"<GateConfig config_file={source}>"
