"""User directory collaborators consulted by the sign-up gate.

Public API::

    from idpgate.directory import InMemoryDirectory, build_directory

    directory = build_directory(settings.directory)
    records = directory.query_by_email("alice@example.com")
"""

from idpgate.directory.base import UserDirectory
from idpgate.directory.bounded import BoundedDirectory
from idpgate.directory.factory import build_directory
from idpgate.directory.memory import InMemoryDirectory

__all__ = [
    "BoundedDirectory",
    "InMemoryDirectory",
    "UserDirectory",
    "build_directory",
]
