"""Build the configured directory backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from idpgate.directory.bounded import BoundedDirectory
from idpgate.directory.memory import InMemoryDirectory

if TYPE_CHECKING:
    from idpgate.config.settings import DirectorySettings
    from idpgate.directory.base import UserDirectory


def build_directory(settings: DirectorySettings) -> UserDirectory:
    """Instantiate the backend named by ``settings.backend``.

    The result is always wrapped in a :class:`BoundedDirectory` so the
    gate never waits on the backend longer than ``timeout_seconds``.
    """
    inner: UserDirectory
    if settings.backend == "memory":
        inner = InMemoryDirectory(settings.records)
    elif settings.backend == "postgres":
        from idpgate.directory.postgres import PostgresDirectory  # noqa: PLC0415

        inner = PostgresDirectory(settings)
    else:
        msg = f"Unknown directory backend '{settings.backend}'"
        raise ValueError(msg)

    return BoundedDirectory(
        inner,
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
        max_workers=settings.max_workers,
    )
