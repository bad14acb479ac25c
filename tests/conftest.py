"""
Pytest configuration and shared fixtures for tradesync tests.

WHAT: Markers plus engine/client/handler fixtures
WHY: Every test starts from a fresh session with a scripted fake client
HOW: open_session() over FakeTradeClient with zero retry delay
"""

import pytest

from tradesync.core import TradeSettings
from tradesync.coordinators import open_session
from tests.fixtures.fake_client import FakeTradeClient, RecordingHandler, MY_ID, OTHER_ID


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (isolated component tests)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (engine + reconciler + retry)"
    )


@pytest.fixture
def client():
    return FakeTradeClient()


@pytest.fixture
def fast_settings():
    """Settings with no delay between retries."""
    return TradeSettings(retry_delay=0)


@pytest.fixture
def engine(client, fast_settings):
    return open_session(
        client,
        my_id=MY_ID,
        other_id=OTHER_ID,
        session_id="session-abc",
        token="token-xyz",
        start_version=1,
        settings=fast_settings,
    )


@pytest.fixture
def handler(engine):
    recording = RecordingHandler()
    engine.set_handler(recording)
    return recording
