"""
Pytest fixtures for KohakuIPAM tests.
Global state resets shared by every test.
"""

from dataclasses import asdict

import pytest
from loguru import logger

from kohakuipam.config import config


@pytest.fixture(autouse=True)
def restore_config():
    """Undo changes made to the global config by CLI callbacks."""
    saved = asdict(config)
    yield
    for name, value in saved.items():
        setattr(config, name, value)


@pytest.fixture(autouse=True)
def silence_logging():
    """Drop sinks added during a test so they never outlive its streams."""
    yield
    logger.remove()
