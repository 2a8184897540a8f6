import logging

import pytest

from newicktree.logger import parse_logger


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@pytest.fixture(autouse=True)
def reset_parse_logger():
    # The trace logger is a module singleton shared by every parse
    parse_logger.disabled = True
    parse_logger.clear()
    yield
    parse_logger.disabled = True
    parse_logger.clear()
