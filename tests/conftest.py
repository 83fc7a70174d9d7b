"""
Shared pytest fixtures for the Search Console test suite.

Provides reusable fixtures for:
- A mocked Webmasters discovery service (with fake batching)
- SearchConsoleClient / SearchConsoleModule instances
- In-memory options and transient stores on a fake clock
- HttpError construction
"""

from datetime import date

import httplib2
import pytest
from unittest.mock import MagicMock
from googleapiclient.errors import HttpError

from clients.search_console import SearchConsoleClient
from datapoints.module import SearchConsoleModule
from memory.options_store import InMemoryOptionsStore
from memory.transient_store import InMemoryTransientStore

SITE_URL = "https://example.com/"
TODAY = date(2019, 10, 15)


# =============================================================================
# Remote Service Fixtures
# =============================================================================

class FakeBatch:
    """Stand-in for BatchHttpRequest that answers from a dict of outcomes."""

    def __init__(self, outcomes: dict, callback) -> None:
        self.outcomes = outcomes
        self.callback = callback
        self.requests = []

    def add(self, request, request_id=None):
        self.requests.append((request_id, request))

    def execute(self):
        for request_id, _ in self.requests:
            outcome = self.outcomes.get(request_id, {})
            if isinstance(outcome, Exception):
                self.callback(request_id, None, outcome)
            else:
                self.callback(request_id, outcome, None)


@pytest.fixture
def make_http_error():
    """Factory for googleapiclient HttpErrors with a given status."""
    def _make(status: int) -> HttpError:
        return HttpError(httplib2.Response({"status": status}), b"{}")
    return _make


@pytest.fixture
def batch_outcomes():
    """Responses (or exceptions) returned by the fake batch, keyed by request id."""
    return {}


@pytest.fixture
def mock_service(batch_outcomes):
    """Mocked Webmasters v3 service."""
    service = MagicMock()
    service.batches = []

    def _new_batch(callback=None):
        batch = FakeBatch(batch_outcomes, callback)
        service.batches.append(batch)
        return batch

    service.new_batch_http_request.side_effect = _new_batch
    return service


@pytest.fixture
def sc_client(mock_service):
    """SearchConsoleClient bound to the mocked service."""
    return SearchConsoleClient(service=mock_service)


# =============================================================================
# Storage Fixtures
# =============================================================================

class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def options():
    return InMemoryOptionsStore()


@pytest.fixture
def transients(clock):
    return InMemoryTransientStore(clock=clock)


@pytest.fixture
def permalinks():
    """Post id -> permalink map used by the permalink resolver."""
    return {
        1: "https://example.com/hello-world/",
        2: "https://example.com/quiet-post/",
    }


# =============================================================================
# Module Fixtures
# =============================================================================

@pytest.fixture
def module(sc_client, options, transients, permalinks):
    """SearchConsoleModule wired to mocks and in-memory storage."""
    return SearchConsoleModule(
        client=sc_client,
        options=options,
        transients=transients,
        site_url=SITE_URL,
        permalink_resolver=permalinks.get,
        today=lambda: TODAY,
    )


@pytest.fixture
def router(module):
    return module.router
