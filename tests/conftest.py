"""Pytest configuration for ardi tests."""

import logging

import pytest

from ardi.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_ardi_logger():
    """Detach handlers bound to streams that a test (or CliRunner) has closed."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
