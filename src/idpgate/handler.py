"""Pre-sign-up trigger entry point.

The identity pool invokes :func:`handler` with the raw trigger payload.
The gate is built once per process from the configuration file named
by ``IDPGATE_CONFIG`` and reused across invocations; it holds no
per-event state.

:class:`~idpgate.errors.Unregistered` propagates to the identity pool,
which rejects the sign-up and shows the message to the principal.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any

from idpgate.gate.signup import SignUpGate
from idpgate.logging.setup import request_id_var
from idpgate.models.event import LifecycleEvent

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IDPGATE_CONFIG"

_gate: SignUpGate | None = None
_gate_lock = threading.Lock()


def _build_gate() -> SignUpGate:
    from idpgate.config import GateConfig  # noqa: PLC0415
    from idpgate.directory import build_directory  # noqa: PLC0415
    from idpgate.logging import configure_logging  # noqa: PLC0415

    config_file = os.environ.get(CONFIG_ENV_VAR)
    if not config_file:
        msg = f"{CONFIG_ENV_VAR} is not set; cannot load the sign-up gate configuration"
        raise RuntimeError(msg)

    settings = GateConfig(config_file=config_file).settings
    configure_logging(settings.logging)
    return SignUpGate(build_directory(settings.directory))


def get_gate() -> SignUpGate:
    """Return the process-wide gate, building it on first use."""
    global _gate  # noqa: PLW0603
    if _gate is None:
        with _gate_lock:
            if _gate is None:
                _gate = _build_gate()
    return _gate


def set_gate(gate: SignUpGate | None) -> None:
    """Install (or clear) the process-wide gate -- testing only."""
    global _gate  # noqa: PLW0603
    _gate = gate


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:  # noqa: ANN401
    """Evaluate one pre-sign-up trigger payload and return it."""
    request_id = getattr(context, "aws_request_id", None) or "-"
    token = request_id_var.set(request_id)
    try:
        log.debug(
            "Pre-sign-up event received",
            extra={"trigger_source": event.get("triggerSource")},
        )
        return get_gate().evaluate(LifecycleEvent(event)).payload
    finally:
        request_id_var.reset(token)
