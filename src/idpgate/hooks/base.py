"""Hook handles: opaque references to deployed decision hooks.

The router never calls a hook itself.  It only records which deployed
function serves which lifecycle event, so a handle carries nothing
beyond a display name and the function identifier the identity pool
invokes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HookHandle:
    """Reference to one deployed decision hook.

    Parameters
    ----------
    name:
        Human-readable name, used in logs and error messages.
    function_arn:
        Identifier the identity pool invokes for the bound event.

    """

    name: str
    function_arn: str

    def __str__(self) -> str:
        return self.name
