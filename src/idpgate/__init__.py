"""idpgate: federated sign-up admission gate and lifecycle hook routing."""

__version__ = "1.0.0"
