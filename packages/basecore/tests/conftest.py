"""
Pytest fixtures for basecore tests.
"""

import pytest

from basecore import correlation
from basecore.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_state():
    """Reset cached settings and the correlation context around each test."""
    get_settings.cache_clear()
    correlation.clear()
    yield
    correlation.clear()
    get_settings.cache_clear()
