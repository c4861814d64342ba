# tests/conftest.py
import httpx
import pytest

from bulk_valuation.core.security import reset_rate_limits
from bulk_valuation.data.valuation_client import HttpValuation

BASE_URL = "https://valuation.test"
API_KEY = "test-key"


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def make_client():
    """
    Build an HttpValuation whose network is a MockTransport around ``handler``.
    The handler may be sync or async (async lets tests simulate slow upstreams).
    """
    def _make(handler):
        return HttpValuation(BASE_URL, API_KEY, transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def call_log():
    """List that handlers append requests to, so tests can count network calls."""
    return []
