"""Shared logging utilities: levels, error records, line format, lock keys.

Every writer targeting the same file must derive the same lock key from
its path, so key derivation lives here next to the line format.
"""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Prefix shared by every lock key so they never clash with unrelated locks
LOCK_NAMESPACE = "LogWriter_"

# Characters that are illegal in a lock name (and in most filenames)
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]')

_LEVEL_ALIASES = {
    "debug": "Debug",
    "info": "Information",
    "information": "Information",
    "warning": "Warning",
    "error": "Error",
    "critical": "Critical",
}


class LogLevel(str, Enum):
    """Severity of a log entry. The value is the name written to the file."""

    DEBUG = "Debug"
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"

    @classmethod
    def parse(cls, value) -> "LogLevel":
        """Accept a LogLevel, its full name, or a short alias like 'info'."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid log level: {value!r}")
        name = _LEVEL_ALIASES.get(value.strip().lower())
        if name is None:
            raise ValueError(f"Invalid log level: {value!r}")
        return cls(name)


@dataclass(frozen=True)
class ErrorRecord:
    """The error attached to a log entry, rendered as 'kind: message'."""

    kind: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorRecord":
        return cls(kind=type(exc).__name__, message=str(exc))


def format_timestamp(now: datetime) -> str:
    """Render yyyy-MM-dd HH:mm:ss.fff (milliseconds truncated)."""
    return now.strftime("%Y-%m-%d %H:%M:%S") + f".{now.microsecond // 1000:03d}"


def format_log_line(
    level: LogLevel,
    message: str,
    error: ErrorRecord | None = None,
    now: datetime | None = None,
) -> str:
    """Build one log entry, without the trailing line terminator.

    The exception line, when present, follows on the next line indented
    by two spaces.
    """
    if now is None:
        now = datetime.now()
    line = f"[{format_timestamp(now)}] [{LogLevel.parse(level).value}] {message}"
    if error is not None:
        line += f"\n  Exception: {error.kind}: {error.message}"
    return line


def sanitize_lock_key(path) -> str:
    """Derive the named-lock key for a log file path.

    The path is made absolute first, then every character in
    \\ / : * ? " < > | becomes '_'. Distinct paths that differ only in
    those characters map to the same key and therefore share a lock.
    """
    absolute = os.path.abspath(os.fspath(path))
    return LOCK_NAMESPACE + _UNSAFE_CHARS.sub("_", absolute)
