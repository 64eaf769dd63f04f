"""Level-specific entry points. Each pins the level and forwards to write_log()."""

from log_utils import LogLevel
from log_writer import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_MS, write_log


def log_debug(path, message, error=None, max_retries=DEFAULT_MAX_RETRIES,
              retry_delay_ms=DEFAULT_RETRY_DELAY_MS) -> bool:
    """Write a Debug entry. Mirrored only when the debug channel is on."""
    return write_log(path, LogLevel.DEBUG, message, error, max_retries, retry_delay_ms)


def log_info(path, message, error=None, max_retries=DEFAULT_MAX_RETRIES,
             retry_delay_ms=DEFAULT_RETRY_DELAY_MS) -> bool:
    """Write an Information entry. Mirrored only when verbose output is on."""
    return write_log(path, LogLevel.INFORMATION, message, error, max_retries, retry_delay_ms)


def log_warning(path, message, error=None, max_retries=DEFAULT_MAX_RETRIES,
                retry_delay_ms=DEFAULT_RETRY_DELAY_MS) -> bool:
    """Write a Warning entry."""
    return write_log(path, LogLevel.WARNING, message, error, max_retries, retry_delay_ms)


def log_error(path, message, error=None, max_retries=DEFAULT_MAX_RETRIES,
              retry_delay_ms=DEFAULT_RETRY_DELAY_MS) -> bool:
    """Write an Error entry."""
    return write_log(path, LogLevel.ERROR, message, error, max_retries, retry_delay_ms)


def log_critical(path, message, error=None, max_retries=DEFAULT_MAX_RETRIES,
                 retry_delay_ms=DEFAULT_RETRY_DELAY_MS) -> bool:
    """Write a Critical entry. Mirrored on the error channel."""
    return write_log(path, LogLevel.CRITICAL, message, error, max_retries, retry_delay_ms)


COMMANDS = {
    "debug": log_debug,
    "info": log_info,
    "warning": log_warning,
    "error": log_error,
    "critical": log_critical,
}
