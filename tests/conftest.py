"""Shared fixtures."""

import logging

import pytest

import log_writer
from console_mirror import CONSOLE_LOGGER


@pytest.fixture(autouse=True)
def reset_default_writer(tmp_path):
    """Give each test a clean default writer with its own lock directory."""
    writer = log_writer.get_writer()
    writer.mirror.debug = False
    writer.mirror.verbose = False
    writer.lock_dir = str(tmp_path / "locks")
    yield writer
    writer.mirror.debug = False
    writer.mirror.verbose = False
    writer.lock_dir = None
    logging.getLogger(CONSOLE_LOGGER).setLevel(logging.NOTSET)


@pytest.fixture
def console_logger():
    """The console mirror logger, restored to defaults afterwards."""
    console = logging.getLogger(CONSOLE_LOGGER)
    yield console
    for handler in list(console.handlers):
        console.removeHandler(handler)
    console.setLevel(logging.NOTSET)
    console.propagate = True


@pytest.fixture
def lock_dir(tmp_path):
    return tmp_path / "locks"
