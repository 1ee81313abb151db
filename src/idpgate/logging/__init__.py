"""Logging subsystem for idpgate.

Public API::

    from idpgate.logging import configure_logging

    configure_logging(settings.logging)
"""

from idpgate.logging.setup import configure_logging

__all__ = ["configure_logging"]
