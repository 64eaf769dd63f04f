"""
Console Mirror - Echoes log messages to the console by severity.

Each level maps to one of four channels. The debug and verbose channels
are off unless enabled; warning and error are always emitted. Output goes
through the standard logging module on the ``log_writer.console`` logger,
so a host application can route it like any other log record.
"""

import logging
import sys

from log_utils import LogLevel

CONSOLE_LOGGER = "log_writer.console"

# Level -> (channel, logging level)
CHANNELS = {
    LogLevel.DEBUG: ("debug", logging.DEBUG),
    LogLevel.INFORMATION: ("verbose", logging.INFO),
    LogLevel.WARNING: ("warning", logging.WARNING),
    LogLevel.ERROR: ("error", logging.ERROR),
    LogLevel.CRITICAL: ("error", logging.ERROR),
}


class ChannelFormatter(logging.Formatter):
    """Render records as 'CHANNEL: message'."""

    def format(self, record: logging.LogRecord) -> str:
        channel = getattr(record, "channel", record.levelname.lower())
        return f"{channel.upper()}: {record.getMessage()}"


class ConsoleMirror:
    """Routes a message to the console channel selected by its level."""

    def __init__(self, debug: bool = False, verbose: bool = False, logger=None):
        self.debug = debug
        self.verbose = verbose
        self.logger = logger or logging.getLogger(CONSOLE_LOGGER)

    def is_enabled(self, channel: str) -> bool:
        if channel == "debug":
            return self.debug
        if channel == "verbose":
            return self.verbose
        return True

    def emit(self, level: LogLevel, message: str) -> bool:
        """Emit the message on its channel. Returns False if suppressed."""
        channel, log_level = CHANNELS[LogLevel.parse(level)]
        if not self.is_enabled(channel):
            return False
        self.logger.log(log_level, message, extra={"channel": channel})
        return True


def enable_console_level() -> None:
    """Let debug and verbose records past the console logger's level.

    Only lowers a level inherited from the root logger; an explicit level
    set by the host application is left alone.
    """
    console = logging.getLogger(CONSOLE_LOGGER)
    if console.level == logging.NOTSET:
        console.setLevel(logging.DEBUG)


def setup_console(stream=None) -> logging.Handler:
    """Attach a 'CHANNEL: message' handler to the console logger.

    The handler passes every record; the mirror's own flags decide what
    reaches it.
    """
    console = logging.getLogger(CONSOLE_LOGGER)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ChannelFormatter())
    console.addHandler(handler)
    console.setLevel(logging.DEBUG)
    console.propagate = False
    return handler
