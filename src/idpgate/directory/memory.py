"""In-memory user directory, used for tests and static deployments."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from idpgate.directory.base import UserDirectory
from idpgate.models.directory import DirectoryRecord


class InMemoryDirectory(UserDirectory):
    """Directory backed by a fixed list of records.

    Records are indexed by case-folded email; insertion order is kept so
    the first matching record is always the first one added.
    """

    def __init__(self, records: Iterable[DirectoryRecord] = ()) -> None:
        self._by_email: dict[str, list[DirectoryRecord]] = {}
        for record in records:
            self.add(record)

    def add(self, record: DirectoryRecord) -> None:
        self._by_email.setdefault(record.email.casefold(), []).append(record)

    def query_by_email(self, email: str) -> Sequence[DirectoryRecord]:
        return tuple(self._by_email.get(email.casefold(), ()))

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_email.values())
