from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    # The CLI binds a stderr handler to whatever stream capsys installed.
    yield
    logger = logging.getLogger("roomgraph")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
