"""
Named Lock - Cross-process mutual exclusion keyed by a log file path.

Each lock is an advisory OS lock on a small file in a shared lock
directory. Threads, processes and independent invocations that derive the
same key contend for the same lock file; different keys never block each
other.
"""

import hashlib
import logging
import tempfile
from pathlib import Path

from filelock import FileLock, Timeout

from log_utils import sanitize_lock_key

logger = logging.getLogger(__name__)

DEFAULT_LOCK_DIR = Path(tempfile.gettempdir()) / "log-writer-locks"

# Longest lock filename most filesystems accept, minus room for ".lock"
_MAX_NAME_LENGTH = 250


class LockTimeoutError(TimeoutError):
    """Raised when a named lock cannot be acquired within its timeout."""

    def __init__(self, key: str, timeout_ms: int):
        super().__init__(
            f"Could not acquire lock '{key}' within {timeout_ms} ms"
        )
        self.key = key
        self.timeout_ms = timeout_ms


def lock_file_name(key: str) -> str:
    """Map a lock key to a filename, hashing keys that are too long."""
    if len(key.encode("utf-8")) <= _MAX_NAME_LENGTH:
        return f"{key}.lock"
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
    return f"{key[:_MAX_NAME_LENGTH - len(digest) - 1]}_{digest}.lock"


class NamedLock:
    """Context manager holding the named lock for one log file path.

    Usage:
        with NamedLock("/var/log/app.log", timeout_ms=5000):
            ...  # only one holder per path at a time
    """

    def __init__(self, path, timeout_ms: int = 5000, lock_dir=None):
        self.key = sanitize_lock_key(path)
        self.timeout_ms = timeout_ms
        self.lock_dir = Path(lock_dir) if lock_dir else DEFAULT_LOCK_DIR
        self.lock_path = self.lock_dir / lock_file_name(self.key)
        self._lock: FileLock | None = None

    @property
    def is_locked(self) -> bool:
        return self._lock is not None and self._lock.is_locked

    def acquire(self) -> None:
        """Block until the lock is held or the timeout elapses."""
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        self._lock = FileLock(str(self.lock_path), timeout=self.timeout_ms / 1000)
        try:
            self._lock.acquire()
        except Timeout as e:
            self._lock = None
            raise LockTimeoutError(self.key, self.timeout_ms) from e
        logger.debug(f"Acquired lock {self.key}")

    def release(self) -> None:
        """Release the lock if held. Safe to call more than once."""
        if self._lock is None:
            return
        lock, self._lock = self._lock, None
        lock.release(force=True)
        logger.debug(f"Released lock {self.key}")

    def __enter__(self) -> "NamedLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
