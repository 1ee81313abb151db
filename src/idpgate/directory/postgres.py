"""PostgreSQL-backed user directory.

Each lookup opens a short-lived connection with a connect timeout and a
per-statement timeout, so a slow database yields an error instead of a
hung sign-up.  Connection failures and query errors are re-raised as
:class:`~idpgate.errors.DirectoryUnavailable`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from idpgate.core.types import RegistrationStatus
from idpgate.directory.base import UserDirectory
from idpgate.errors import DirectoryUnavailable
from idpgate.models.directory import DirectoryRecord

if TYPE_CHECKING:
    from idpgate.config.settings import DirectorySettings

log = logging.getLogger(__name__)

_TABLE_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$")


class PostgresDirectory(UserDirectory):
    """Look up users in a PostgreSQL table by case-insensitive email."""

    def __init__(self, settings: DirectorySettings) -> None:
        if not settings.dsn:
            msg = "PostgresDirectory requires directory.dsn"
            raise ValueError(msg)
        if not _TABLE_RE.match(settings.table):
            msg = f"Invalid directory table name '{settings.table}'"
            raise ValueError(msg)
        self._dsn = settings.dsn
        self._connect_timeout = max(1, int(settings.timeout_seconds))
        self._statement_timeout_ms = int(settings.timeout_seconds * 1000)
        self._query = sql.SQL(
            "SELECT user_id, email, status, given_name, family_name, created_at "
            "FROM {} WHERE lower(email) = lower(%s) ORDER BY created_at",
        ).format(sql.Identifier(*settings.table.split(".")))

    def query_by_email(self, email: str) -> Sequence[DirectoryRecord]:
        try:
            with psycopg.connect(
                self._dsn,
                connect_timeout=self._connect_timeout,
                options=f"-c statement_timeout={self._statement_timeout_ms}",
                row_factory=dict_row,
            ) as conn:
                rows = conn.execute(self._query, (email,)).fetchall()
        except psycopg.Error as exc:
            msg = f"Directory query failed: {exc}"
            raise DirectoryUnavailable(msg) from exc
        return tuple(self._row_to_record(row) for row in rows)

    @staticmethod
    def _row_to_record(row: dict) -> DirectoryRecord:
        return DirectoryRecord(
            user_id=str(row["user_id"]),
            email=row["email"],
            status=RegistrationStatus(row["status"]),
            given_name=row.get("given_name"),
            family_name=row.get("family_name"),
            created_at=row["created_at"],
        )

    def __repr__(self) -> str:
        return "<PostgresDirectory>"
