"""Pytest configuration for dashboard tests."""

import pytest

from cabdash.metrics import reset_metrics_collector
from tests.helpers import FakeClock


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Each test starts with an empty metrics collector."""
    reset_metrics_collector()
    yield
    reset_metrics_collector()


@pytest.fixture
def clock():
    return FakeClock()
