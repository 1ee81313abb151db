"""Root conftest for the idpgate test suite."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
import yaml

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Config data shared by multiple test modules
# ---------------------------------------------------------------------------


@pytest.fixture()
def minimal_config_data() -> dict:
    """Return a dict containing the minimum required config fields."""
    return {
        "pool": {"namespace": "genomics-dev"},
        "directory": {
            "backend": "memory",
            "records": [{"email": "alice@example.com", "user_id": "u-alice"}],
        },
    }


@pytest.fixture()
def federated_config_data(minimal_config_data: dict) -> dict:
    """Minimal config plus an OIDC broker and redirect sets."""
    data = dict(minimal_config_data)
    data["federation"] = {
        "name": "corp-oidc",
        "client_id": "client-123",
        "client_secret": "s3cr3t-value",
        "issuer_url": "https://issuer.example.com/pool",
    }
    data["client"] = {
        "callback_urls": ["https://app.example.com/signin"],
        "logout_urls": ["https://app.example.com/signout"],
    }
    return data


def _write(tmp_path: Path, data: dict, name: str = "config.yaml") -> Path:
    cfg = tmp_path / name
    cfg.write_text(
        yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return cfg


@pytest.fixture()
def tmp_config_file(tmp_path: Path, minimal_config_data: dict) -> Path:
    """Write *minimal_config_data* to a temp YAML file and return its path."""
    return _write(tmp_path, minimal_config_data)


@pytest.fixture()
def write_config(tmp_path: Path):
    """Return a function writing an arbitrary config dict to a temp file."""

    def _factory(data: dict, name: str = "config.yaml") -> Path:
        return _write(tmp_path, data, name)

    return _factory


# ---------------------------------------------------------------------------
# Singleton cleanup: autouse so every test gets a fresh slate
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_config():
    """Reset the GateConfig singleton and cached gate around every test."""
    from idpgate import handler
    from idpgate.config.gate_config import GateConfig

    GateConfig.reset()
    handler.set_gate(None)
    yield
    GateConfig.reset()
    handler.set_gate(None)

    # configure_logging() detaches the idpgate hierarchy from the root
    # logger; reattach it so caplog keeps working in later tests.
    root = logging.getLogger("idpgate")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    logging.getLogger("idpgate.security").handlers.clear()


# ---------------------------------------------------------------------------
# Directory / event helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def alice_directory():
    """In-memory directory holding a single record for alice@example.com."""
    from idpgate.directory.memory import InMemoryDirectory
    from idpgate.models.directory import DirectoryRecord

    return InMemoryDirectory([DirectoryRecord(user_id="u-alice", email="alice@example.com")])


@pytest.fixture()
def make_event():
    """Return a factory for pre-sign-up lifecycle events."""
    from idpgate.models.event import LifecycleEvent

    def _factory(trigger_source: str, email: str | None = "alice@example.com") -> LifecycleEvent:
        return LifecycleEvent.build(trigger_source, email=email)

    return _factory
