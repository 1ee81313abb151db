"""Directory record entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from idpgate.core.types import RegistrationStatus

# Sentinel for timestamps the backing store did not provide.
_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class DirectoryRecord:
    user_id: str
    email: str
    status: RegistrationStatus = RegistrationStatus.ACTIVE
    given_name: str | None = None
    family_name: str | None = None
    created_at: datetime = _EPOCH
