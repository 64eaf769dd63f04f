"""
logwrite - Append one entry to a log file from the command line.

Every invocation is its own process and contends for the same named lock
as any other writer of that file, so shell scripts and cron jobs can share
a log with running Python services.

    logwrite info /var/log/app.log "started"
    logwrite error /var/log/app.log "boom" --error-kind IOError --error-message "disk full"
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from console_mirror import setup_console
from log_commands import COMMANDS
from log_utils import ErrorRecord
from log_writer import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_MS, configure

load_dotenv()

# Defaults for the command-line flags
DEBUG = os.getenv("LOGWRITER_DEBUG", "false").lower() == "true"
VERBOSE = os.getenv("LOGWRITER_VERBOSE", "false").lower() == "true"
LOCK_DIR = os.getenv("LOGWRITER_LOCK_DIR", None)
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")


def resolve_log_level(name: str) -> int:
    """Map a level name like "INFO" to its number, falling back to WARNING."""
    level = getattr(logging, name.upper(), None) if name else None
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    return logging.WARNING


logger = logging.getLogger("logwrite")


def setup_logging() -> None:
    """Configure diagnostics on stderr plus the console mirror channels."""
    logging.basicConfig(
        level=resolve_log_level(LOG_LEVEL),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    setup_console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logwrite",
        description="Append a formatted entry to a log file under a cross-process lock.",
    )
    parser.add_argument("level", choices=sorted(COMMANDS), help="Entry severity")
    parser.add_argument("path", help="Log file to append to")
    parser.add_argument("message", help="Message text")
    parser.add_argument("--error-kind", help="Exception type name for the entry")
    parser.add_argument("--error-message", default="", help="Exception message for the entry")
    parser.add_argument("--max-retries", type=int, default=DEFAULT_MAX_RETRIES)
    parser.add_argument("--retry-delay-ms", type=int, default=DEFAULT_RETRY_DELAY_MS)
    parser.add_argument("--debug", action="store_true", default=DEBUG,
                        help="Mirror debug entries to the console")
    parser.add_argument("--verbose", action="store_true", default=VERBOSE,
                        help="Mirror information entries to the console")
    parser.add_argument("--lock-dir", default=LOCK_DIR, help="Directory for lock files")
    return parser


def main(argv=None) -> int:
    """Entry point. Returns 0 on success, 1 on a failed write."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.path.strip() or not args.message:
        parser.error("path and message must be non-empty")
    if args.max_retries < 0 or args.retry_delay_ms < 0:
        parser.error("--max-retries and --retry-delay-ms must be non-negative")
    if args.error_message and not args.error_kind:
        parser.error("--error-message requires --error-kind")

    setup_logging()
    configure(debug=args.debug, verbose=args.verbose, lock_dir=args.lock_dir)

    error = None
    if args.error_kind:
        error = ErrorRecord(kind=args.error_kind, message=args.error_message)

    ok = COMMANDS[args.level](
        args.path,
        args.message,
        error=error,
        max_retries=args.max_retries,
        retry_delay_ms=args.retry_delay_ms,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
