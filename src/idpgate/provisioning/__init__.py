"""Provisioning-time descriptors for the identity pool.

Public API::

    from idpgate.provisioning import PoolBuilder, frontend_export

    descriptor = PoolBuilder.from_settings(settings).build()
"""

from idpgate.provisioning.federation import (
    ClientDescriptor,
    FederatedBroker,
    FederationConfig,
    build_client,
)
from idpgate.provisioning.frontend import frontend_export
from idpgate.provisioning.pool import PoolBuilder, PoolDescriptor

__all__ = [
    "ClientDescriptor",
    "FederatedBroker",
    "FederationConfig",
    "PoolBuilder",
    "PoolDescriptor",
    "build_client",
    "frontend_export",
]
