"""Sign-up admission gate.

Public API::

    from idpgate.gate import SignUpGate

    gate = SignUpGate(directory)
    gate.evaluate(event)
"""

from idpgate.gate.signup import SignUpGate

__all__ = ["SignUpGate"]
