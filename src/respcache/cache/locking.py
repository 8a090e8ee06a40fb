"""Advisory file locks for cache entries.

Readers take a shared lock and writers an exclusive one via
:func:`fcntl.flock`. Acquisition is non-blocking with a short retry loop so
that a lock held by a stuck process turns into :class:`LockTimeout` after
``timeout`` seconds instead of hanging the request.
"""

from __future__ import annotations

import fcntl
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO

_RETRY_INTERVAL = 0.01


class LockTimeout(Exception):
    """The lock could not be acquired within the allotted time."""


def acquire(fileobj: IO, exclusive: bool, timeout: float) -> None:
    """Lock *fileobj*, retrying until *timeout* seconds have passed.

    Raises:
        LockTimeout: If the lock is still held elsewhere at the deadline,
            or the platform refuses the lock.
    """
    mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
    deadline = time.monotonic() + timeout
    while True:
        try:
            fcntl.flock(fileobj.fileno(), mode | fcntl.LOCK_NB)
            return
        except BlockingIOError:
            if time.monotonic() >= deadline:
                raise LockTimeout(f"Timed out locking {getattr(fileobj, 'name', fileobj)}") from None
            time.sleep(_RETRY_INTERVAL)
        except OSError as exc:
            raise LockTimeout(f"Cannot lock {getattr(fileobj, 'name', fileobj)}: {exc}") from exc


def release(fileobj: IO) -> None:
    fcntl.flock(fileobj.fileno(), fcntl.LOCK_UN)


@contextmanager
def locked(fileobj: IO, exclusive: bool = False, timeout: float = 1.0) -> Iterator[IO]:
    """Hold a shared (default) or exclusive lock on *fileobj* for the block."""
    acquire(fileobj, exclusive, timeout)
    try:
        yield fileobj
    finally:
        release(fileobj)
