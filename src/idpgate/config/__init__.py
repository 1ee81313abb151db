"""Configuration subsystem for idpgate.

Public API::

    from idpgate.config import get_config, GateConfig

    # At startup:
    GateConfig(config_file="config.yaml")

    # Everywhere else:
    cfg = get_config()
    region = cfg.settings.pool.region      # typed access
    timeout = cfg.get("directory.timeout_seconds")
"""

from idpgate.config.gate_config import (
    ConfigValidationError,
    GateConfig,
    get_config,
)
from idpgate.config.settings import (
    ClientSettings,
    DirectorySettings,
    GateSettings,
    LoggingSettings,
    PoolSettings,
    TriggerEntrySettings,
    build_settings,
)

__all__ = [
    "ClientSettings",
    "ConfigValidationError",
    "DirectorySettings",
    "GateConfig",
    "GateSettings",
    "LoggingSettings",
    "PoolSettings",
    "TriggerEntrySettings",
    "build_settings",
    "get_config",
]
