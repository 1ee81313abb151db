"""Deadline and retry wrapper around any :class:`UserDirectory`.

The wrapped lookup runs on a :class:`~concurrent.futures.ThreadPoolExecutor`
worker so the caller can stop waiting after ``timeout_seconds``.  A
lookup that times out is cancelled (if it has not started) and reported
as :class:`~idpgate.errors.DirectoryUnavailable`; the caller is never
left hanging.

Retries, when configured, use exponential backoff and share the same
overall deadline.

Usage::

    directory = BoundedDirectory(PostgresDirectory(settings), timeout_seconds=2)
    records = directory.query_by_email("alice@example.com")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import TYPE_CHECKING

from idpgate.directory.base import UserDirectory
from idpgate.errors import DirectoryUnavailable

if TYPE_CHECKING:
    from idpgate.models.directory import DirectoryRecord

log = logging.getLogger(__name__)

_BACKOFF_BASE_SECONDS = 0.1


class BoundedDirectory(UserDirectory):
    """Run lookups against *inner* with a deadline and optional retries.

    Parameters
    ----------
    inner:
        The directory that actually answers lookups.
    timeout_seconds:
        Overall deadline for one :meth:`query_by_email` call, retries
        included.
    max_retries:
        Additional attempts after a failed lookup.
    max_workers:
        Size of the lookup thread pool.

    """

    def __init__(
        self,
        inner: UserDirectory,
        timeout_seconds: float = 3.0,
        max_retries: int = 0,
        max_workers: int = 4,
    ) -> None:
        self._inner = inner
        self._timeout = timeout_seconds
        self._max_retries = max_retries
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="idpgate-directory",
        )
        self._closed = threading.Event()

    @property
    def inner(self) -> UserDirectory:
        return self._inner

    def query_by_email(self, email: str) -> Sequence[DirectoryRecord]:
        if self._closed.is_set():
            msg = "Directory has been closed"
            raise DirectoryUnavailable(msg)

        deadline = time.monotonic() + self._timeout
        last_error: BaseException | None = None

        for attempt in range(self._max_retries + 1):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            future = self._executor.submit(self._inner.query_by_email, email)
            try:
                return future.result(timeout=remaining)
            except FutureTimeout as exc:
                future.cancel()
                log.warning(
                    "Directory lookup timed out after %.2fs (attempt %d)",
                    self._timeout,
                    attempt + 1,
                )
                last_error = exc
                break
            except Exception as exc:
                last_error = exc
                log.debug(
                    "Directory lookup failed (attempt %d/%d): %s",
                    attempt + 1,
                    self._max_retries + 1,
                    exc,
                )
                if attempt < self._max_retries:
                    pause = _BACKOFF_BASE_SECONDS * (2**attempt)
                    time.sleep(min(pause, max(0.0, deadline - time.monotonic())))

        msg = f"Directory lookup did not complete: {last_error or 'deadline exceeded'}"
        raise DirectoryUnavailable(msg) from last_error

    def close(self) -> None:
        """Shut the worker pool down and close the wrapped directory.

        Safe to call multiple times, only the first call has effect.
        """
        if self._closed.is_set():
            return
        self._closed.set()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._inner.close()

    def __repr__(self) -> str:
        return f"<BoundedDirectory inner={self._inner!r} timeout={self._timeout}s>"
