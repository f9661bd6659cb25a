"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: ClientConfig pointing at a fake backend
    - store: Empty MessageStore
    - snapshots: Every store snapshot published while a test runs
    - fake_backend: Factory building an httpx client that streams given chunks

The fake backend uses httpx.MockTransport so chunk boundaries reach the
client exactly as the test defines them.
"""

from collections.abc import AsyncGenerator, AsyncIterator, Callable, Sequence

import httpx
import pytest

from src.client.config import ClientConfig
from src.models.schemas import ChatEntry
from src.store.message_store import MessageStore

BACKEND_URL = "http://assistant.test/assistant/stream"


class FakeBackend:
    """Records requests and answers them with a chunked plain-text body.

    Attributes:
        chunks: Body chunks sent in order.
        status_code: Response status.
        fail_after: Raise httpx.ReadError after this many chunks (None = never).
        connect_error: Raise this before any response is produced.
        requests: Requests received so far.
    """

    def __init__(self) -> None:
        self.chunks: Sequence[bytes] = ()
        self.status_code = 200
        self.fail_after: int | None = None
        self.connect_error: Exception | None = None
        self.requests: list[httpx.Request] = []

    async def _body(self) -> AsyncIterator[bytes]:
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise httpx.ReadError("connection reset by peer")
            yield chunk
        if self.fail_after is not None and self.fail_after >= len(self.chunks):
            raise httpx.ReadError("connection reset by peer")

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error is not None:
            raise self.connect_error
        return httpx.Response(
            self.status_code,
            headers={"Content-Type": "text/plain; charset=utf-8"},
            content=self._body(),
        )


@pytest.fixture
def client_config() -> ClientConfig:
    """Return config aimed at the fake backend with a known token."""
    return ClientConfig(endpoint_url=BACKEND_URL, token="test-token", idle_timeout=5.0)


@pytest.fixture
def store() -> MessageStore:
    return MessageStore()


@pytest.fixture
def snapshots(store: MessageStore) -> list[tuple[ChatEntry, ...]]:
    """Collect every snapshot the store publishes."""
    collected: list[tuple[ChatEntry, ...]] = []
    store.subscribe(collected.append)
    return collected


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def http_client(fake_backend: FakeBackend) -> AsyncGenerator[httpx.AsyncClient]:
    """Create async HTTP client routed to the fake backend.

    Yields:
        AsyncClient whose requests are answered by ``fake_backend``.
    """
    transport = httpx.MockTransport(fake_backend.handler)
    async with httpx.AsyncClient(transport=transport) as client:
        yield client


@pytest.fixture
def make_chunks() -> Callable[..., list[bytes]]:
    """Encode text pieces into UTF-8 byte chunks."""

    def _make(*pieces: str) -> list[bytes]:
        return [p.encode("utf-8") for p in pieces]

    return _make
