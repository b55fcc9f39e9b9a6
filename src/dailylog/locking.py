"""File locking utilities for concurrent append safety."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import IO, Generator

import portalocker

logger = logging.getLogger(__name__)


class LockError(Exception):
    """Raised when an advisory lock cannot be taken or released."""

    def __init__(self, action: str, cause: BaseException):
        super().__init__(f"failed to {action} lock: {cause}")
        self.action = action
        self.cause = cause


@contextmanager
def file_lock(handle: IO) -> Generator[IO, None, None]:
    """Hold an exclusive advisory lock on an open file.

    Blocks until the lock is granted; there is no timeout. The lock is
    taken on the file itself (flock semantics), so it excludes other
    processes as well as other open handles in this process.

    Args:
        handle: Open file object to lock

    Yields:
        The same handle, locked

    Raises:
        LockError: If the lock cannot be acquired, or cannot be released
            after the body completed normally. A release failure while the
            body is already raising is logged and the body's error wins.
    """
    try:
        portalocker.lock(handle, portalocker.LOCK_EX)
    except (portalocker.LockException, OSError) as e:
        raise LockError("acquire", e) from e

    failed = False
    try:
        yield handle
    except BaseException:
        failed = True
        raise
    finally:
        try:
            portalocker.unlock(handle)
        except (portalocker.LockException, OSError) as e:
            if not failed:
                raise LockError("release", e) from e
            logger.warning("Failed to release lock on %s: %s", getattr(handle, "name", handle), e)
