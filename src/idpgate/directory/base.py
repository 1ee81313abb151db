"""Abstract base class for user directory lookups.

A directory answers one question for the gate: which provisioned
accounts match this email address.  Matching is case-insensitive and is
the directory's responsibility, not the caller's.

Implementations raise :class:`~idpgate.errors.DirectoryUnavailable` (or
any other exception) when they cannot answer.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from idpgate.models.directory import DirectoryRecord


class UserDirectory(abc.ABC):
    """Read-only lookup of provisioned accounts by email."""

    @abc.abstractmethod
    def query_by_email(self, email: str) -> Sequence[DirectoryRecord]:
        """Return every record whose email matches *email*, possibly empty."""

    def close(self) -> None:
        """Release any resources held by the directory.

        The default implementation is a no-op.
        """
