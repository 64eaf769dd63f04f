"""
Log Writer - Appends formatted entries to a log file shared by many writers.

One call to LogWriter.write():
1. Formats the entry once
2. Per attempt: ensures the parent directory, takes the file's named lock
   (5000 ms timeout), appends the entry and fsyncs, then releases the lock
3. Retries failed attempts up to max_retries times with a fixed delay
4. Mirrors the message to the console regardless of the file outcome
5. Reports exhausted retries as a single error record and returns False
"""

import logging
import os
import time
from pathlib import Path

from console_mirror import ConsoleMirror, enable_console_level
from log_utils import ErrorRecord, LogLevel, format_log_line
from named_lock import NamedLock

logger = logging.getLogger(__name__)

# Fixed wait for the named lock, separate from the delay between attempts
LOCK_TIMEOUT_MS = 5000

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 100


class LogContractError(ValueError):
    """Raised for invalid arguments, before any I/O is attempted."""


class LogWriteError(Exception):
    """A write that still failed after all retries."""

    def __init__(self, path: str, retries: int, cause: BaseException):
        super().__init__(
            f"Failed to write to log file '{path}' after {retries} retries: {cause}"
        )
        self.path = path
        self.retries = retries
        self.cause = cause


def _check_non_negative_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise LogContractError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _validate(path, level, message, error, max_retries, retry_delay_ms):
    """Check caller arguments. Returns (path, level, error record)."""
    if isinstance(path, os.PathLike):
        path = os.fspath(path)
    if not isinstance(path, str) or not path.strip():
        raise LogContractError("path is required and must be a non-empty string")
    if not isinstance(message, str) or not message:
        raise LogContractError("message is required and must be a non-empty string")
    try:
        level = LogLevel.parse(level)
    except ValueError as e:
        raise LogContractError(str(e)) from e
    if isinstance(error, BaseException):
        error = ErrorRecord.from_exception(error)
    elif error is not None and not isinstance(error, ErrorRecord):
        raise LogContractError(
            f"error must be an ErrorRecord or an exception, got {type(error).__name__}"
        )
    _check_non_negative_int("max_retries", max_retries)
    _check_non_negative_int("retry_delay_ms", retry_delay_ms)
    return path, level, error


class LogWriter:
    """Writes log entries to files under a per-file cross-process lock.

    Args:
        mirror: Console mirror for the message; defaults to one with the
            debug and verbose channels off
        lock_dir: Directory holding the lock files (shared by all writers
            that must exclude each other)
        raise_on_failure: Raise LogWriteError instead of returning False
            once retries are exhausted
    """

    def __init__(
        self,
        mirror: ConsoleMirror = None,
        lock_dir: str = None,
        raise_on_failure: bool = False,
    ):
        self.mirror = mirror or ConsoleMirror()
        self.lock_dir = lock_dir
        self.raise_on_failure = raise_on_failure

    def write(
        self,
        path,
        level,
        message: str,
        error=None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
    ) -> bool:
        """Append one entry to the log file at path. Returns True on success."""
        path, level, error = _validate(
            path, level, message, error, max_retries, retry_delay_ms
        )
        entry = format_log_line(level, message, error)

        attempt = 0
        last_error: BaseException | None = None
        success = False
        while attempt <= max_retries:
            try:
                self._append(path, entry)
                success = True
                break
            except Exception as e:
                last_error = e
                logger.debug(
                    f"Write attempt {attempt + 1}/{max_retries + 1} to {path} failed: {e}"
                )
            if attempt < max_retries:
                time.sleep(retry_delay_ms / 1000)
            attempt += 1

        self._mirror(level, message)

        if success:
            return True

        failure = LogWriteError(path, max_retries, last_error)
        if self.raise_on_failure:
            raise failure from last_error
        logger.error(str(failure))
        return False

    def _append(self, path: str, entry: str) -> None:
        """One attempt: directory, lock, append, release."""
        parent = Path(path).parent
        if str(parent):
            parent.mkdir(parents=True, exist_ok=True)

        with NamedLock(path, timeout_ms=LOCK_TIMEOUT_MS, lock_dir=self.lock_dir):
            with open(path, "a", encoding="utf-8") as f:
                f.write(entry + "\n")
                f.flush()
                os.fsync(f.fileno())

    def _mirror(self, level: LogLevel, message: str) -> None:
        try:
            self.mirror.emit(level, message)
        except Exception as e:
            logger.debug(f"Console mirror failed: {e}")


_default_writer = LogWriter()


def configure(debug: bool = None, verbose: bool = None, lock_dir: str = None) -> LogWriter:
    """Adjust the process-wide default writer. None leaves a setting as is.

    Turning on debug or verbose also lowers the console logger to DEBUG so
    those records reach its handlers. Something still has to print them:
    call console_mirror.setup_console() or configure a handler that
    accepts DEBUG/INFO records (Python's last-resort handler shows
    WARNING and above only).
    """
    if debug is not None:
        _default_writer.mirror.debug = debug
    if verbose is not None:
        _default_writer.mirror.verbose = verbose
    if lock_dir is not None:
        _default_writer.lock_dir = lock_dir
    if debug or verbose:
        enable_console_level()
    return _default_writer


def get_writer() -> LogWriter:
    return _default_writer


def write_log(
    path,
    level,
    message: str,
    error=None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
) -> bool:
    """Write through the process-wide default writer."""
    return _default_writer.write(
        path, level, message, error, max_retries, retry_delay_ms
    )
