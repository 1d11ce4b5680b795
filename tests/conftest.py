"""
Global pytest configuration and fixtures.
"""

import pytest

from typedparams import reset_config


@pytest.fixture(autouse=True)
def default_config():
    """Run every test against the default configuration."""
    reset_config()
    yield
    reset_config()
