"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Manually advanced clock for SessionTimer tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today():
    """A fixed reference day."""
    return date(2024, 3, 15)


@pytest.fixture
def clock():
    """Clock starting at 09:00 on the reference day."""
    return FakeClock(datetime(2024, 3, 15, 9, 0, 0))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Isolate tests from a developer's environment and .env file."""
    from config import get_settings

    for key in (
        "SESSION_MIN_MINUTES",
        "SESSION_MAX_MINUTES",
        "HABIT_THRESHOLD_MINUTES",
        "ENGAGEMENT_THRESHOLD_MINUTES",
        "ENGAGEMENT_MILESTONES",
        "DAILY_GOAL_MINUTES",
        "REVIEW_INTERVAL_TABLE",
        "ACTIVITY_RETENTION_DAYS",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
