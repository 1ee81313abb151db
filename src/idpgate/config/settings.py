"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation; these builders
are what the application actually reads.

Access pattern::

    from idpgate.config import get_config

    pool = get_config().settings.pool
    print(pool.namespace, pool.region)
"""

from __future__ import annotations

from dataclasses import dataclass

from idpgate.core.types import AttributeRequestMethod, RegistrationStatus
from idpgate.models.directory import DirectoryRecord
from idpgate.provisioning.federation import FederationConfig

# ---------------------------------------------------------------------------
# Pool
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PoolSettings:
    """Identity pool naming, region and sender key."""

    namespace: str
    env_type: str
    region: str
    domain_prefix: str
    sender_key_id: str | None
    admin_group: str


def _build_pool(data: dict | None) -> PoolSettings:
    d = data or {}
    namespace = d["namespace"]
    return PoolSettings(
        namespace=namespace,
        env_type=d.get("env_type", "dev"),
        region=d.get("region", "us-east-1"),
        domain_prefix=d.get("domain_prefix", namespace),
        sender_key_id=d.get("sender_key_id"),
        admin_group=d.get("admin_group", "SystemAdmin"),
    )


# ---------------------------------------------------------------------------
# Federation
# ---------------------------------------------------------------------------


def _build_federation(data: dict | None) -> FederationConfig | None:
    if not data or not data.get("enabled", True):
        return None
    return FederationConfig(
        name=data["name"],
        client_id=data["client_id"],
        client_secret=data["client_secret"],
        issuer_url=data["issuer_url"],
        attribute_mapping=tuple(
            sorted(
                (
                    data.get("attribute_mapping")
                    or {
                        "email": "email",
                        "given_name": "given_name",
                        "family_name": "family_name",
                    }
                ).items()
            )
        ),
        attribute_request_method=AttributeRequestMethod(
            data.get("attribute_request_method", "POST"),
        ),
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClientSettings:
    """Identity pool client: OAuth redirect sets and secret generation."""

    callback_urls: tuple[str, ...]
    logout_urls: tuple[str, ...]
    generate_secret: bool
    prevent_user_existence_errors: bool


def _build_client(data: dict | None) -> ClientSettings:
    d = data or {}
    return ClientSettings(
        callback_urls=tuple(d.get("callback_urls", [])),
        logout_urls=tuple(d.get("logout_urls", [])),
        generate_secret=d.get("generate_secret", True),
        prevent_user_existence_errors=d.get("prevent_user_existence_errors", True),
    )


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TriggerEntrySettings:
    """One lifecycle event -> hook association from the config file."""

    event: str
    hook_name: str
    function_arn: str
    enabled: bool


def _build_triggers(data: list | None) -> tuple[TriggerEntrySettings, ...]:
    from idpgate.hooks.events import DEFAULT_HOOK_ROUTES, KNOWN_EVENTS, EventKind  # noqa: PLC0415

    entries = []
    for idx, entry in enumerate(data or []):
        event = entry["event"]
        if event not in KNOWN_EVENTS:
            msg = (
                f"triggers[{idx}].event: unknown event '{event}'. "
                f"Known events: {sorted(KNOWN_EVENTS)}"
            )
            raise ValueError(msg)
        hook = entry.get("hook") or {}
        hook_name = hook.get("name") or DEFAULT_HOOK_ROUTES[EventKind(event)]
        entries.append(
            TriggerEntrySettings(
                event=event,
                hook_name=hook_name,
                function_arn=hook.get("function_arn", hook_name),
                enabled=entry.get("enabled", True),
            )
        )
    return tuple(entries)


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DirectorySettings:
    """User directory backend consulted by the sign-up gate."""

    backend: str
    dsn: str | None
    table: str
    timeout_seconds: float
    max_retries: int
    max_workers: int
    records: tuple[DirectoryRecord, ...]


def _build_directory(data: dict | None) -> DirectorySettings:
    d = data or {}
    records = tuple(
        DirectoryRecord(
            user_id=str(r.get("user_id", r["email"])),
            email=r["email"],
            status=RegistrationStatus(r.get("status", "active")),
            given_name=r.get("given_name"),
            family_name=r.get("family_name"),
        )
        for r in d.get("records", [])
    )
    return DirectorySettings(
        backend=d.get("backend", "memory"),
        dsn=d.get("dsn"),
        table=d.get("table", "users"),
        timeout_seconds=float(d.get("timeout_seconds", 3)),
        max_retries=d.get("max_retries", 0),
        max_workers=d.get("max_workers", 4),
        records=records,
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Application logging configuration (level, format, audit)."""

    level: str
    format: str
    audit_file: str | None
    audit_max_file_size_bytes: int
    audit_backup_count: int


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "json"),
        audit_file=d.get("audit_file"),
        audit_max_file_size_bytes=d.get("audit_max_file_size_bytes", 104857600),
        audit_backup_count=d.get("audit_backup_count", 10),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GateSettings:
    pool: PoolSettings
    federation: FederationConfig | None
    client: ClientSettings
    triggers: tuple[TriggerEntrySettings, ...]
    directory: DirectorySettings
    logging: LoggingSettings


def build_settings(data: dict) -> GateSettings:
    """Build the full typed settings tree from raw config data.

    Called once during :class:`GateConfig` initialization after
    schema validation and environment-variable resolution.
    """
    return GateSettings(
        pool=_build_pool(data.get("pool")),
        federation=_build_federation(data.get("federation")),
        client=_build_client(data.get("client")),
        triggers=_build_triggers(data.get("triggers")),
        directory=_build_directory(data.get("directory")),
        logging=_build_logging(data.get("logging")),
    )
