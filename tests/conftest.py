"""Pytest configuration and shared fixtures for touch-indicator tests

Provides fake transports and clocks so the connection manager and tracker
can be driven deterministically without a network.
"""

import logging

import pytest

from fakes import FakeClock
from touch_indicator.config import get_settings


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reset_settings():
    """Give each test a fresh Settings instance."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)
