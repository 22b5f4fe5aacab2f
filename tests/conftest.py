"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

# Add tests directory to path so fakes can be imported
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from fakes import FIXED_NOW, TEST_TOKEN, FakeAPI  # noqa: E402

from eventrel import EventrelClient  # noqa: E402


class FakeClock:
    """Settable clock returning timezone-aware datetimes."""

    def __init__(self, now=FIXED_NOW) -> None:
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def api():
    """Fake API recording every request."""
    return FakeAPI()


@pytest.fixture
def clock():
    """Clock fixed at 2025-01-15 12:00:00 UTC."""
    return FakeClock()


@pytest.fixture
def client(api, clock):
    """Client wired to the fake API."""
    client = EventrelClient(
        TEST_TOKEN,
        transport=httpx.MockTransport(api.handler),
        clock=clock,
    )
    yield client
    client.close()
