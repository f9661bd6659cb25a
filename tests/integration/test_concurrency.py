"""Integration tests for overlapping submissions and cancellation.

Uses a backend that holds the stream open until the test releases it, so
a second submission or a cancellation lands mid-exchange.
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator

import httpx
import pytest
import pytest_check as check

from src.client.config import ClientConfig
from src.client.ingestor import StreamIngestor
from src.models.schemas import EntryRole, ExchangeState
from src.store.message_store import MessageStore


class GatedBackend:
    """Sends a first chunk, then waits for ``release`` before the rest."""

    def __init__(self) -> None:
        self.first_chunk_sent = asyncio.Event()
        self.release = asyncio.Event()
        self.requests = 0

    async def _body(self) -> AsyncIterator[bytes]:
        yield b"Pensando"
        self.first_chunk_sent.set()
        await self.release.wait()
        yield b" listo"

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        return httpx.Response(200, content=self._body())


@pytest.fixture
def gated() -> GatedBackend:
    return GatedBackend()


@pytest.fixture
async def ingestor(
    store: MessageStore, client_config: ClientConfig, gated: GatedBackend
) -> AsyncGenerator[StreamIngestor]:
    """Yield an ingestor wired to the gated backend."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(gated.handler)) as client:
        yield StreamIngestor(store=store, config=client_config, client=client)


class TestRejectWhileBusy:
    """A second submission during an exchange is refused."""

    async def test_second_submission_rejected(
        self, ingestor: StreamIngestor, gated: GatedBackend
    ) -> None:
        """The overlapping call returns False and leaves the log alone."""
        first = asyncio.create_task(ingestor.submit("primera"))
        await gated.first_chunk_sent.wait()
        await asyncio.sleep(0)

        check.is_true(ingestor.is_busy())
        check.equal(ingestor.state, ExchangeState.STREAMING)
        entries_before = ingestor.store.entries

        rejected = await ingestor.submit("segunda")

        check.is_false(rejected)
        check.equal(ingestor.store.entries, entries_before)

        gated.release.set()
        check.is_true(await first)
        check.equal(gated.requests, 1)
        check.equal(
            [(e.role, e.text) for e in ingestor.store],
            [(EntryRole.USER, "primera"), (EntryRole.BOT_FINAL, "Pensando listo")],
        )

    async def test_accepts_again_after_completion(
        self, ingestor: StreamIngestor, gated: GatedBackend
    ) -> None:
        """Once an exchange is done a new one may start."""
        gated.release.set()
        await ingestor.submit("uno")

        gated.first_chunk_sent.clear()
        ran = await ingestor.submit("dos")

        check.is_true(ran)
        check.equal(gated.requests, 2)


class TestCancellation:
    """Cancelling the task running an exchange."""

    async def test_cancel_drops_partial_answer(
        self, ingestor: StreamIngestor, gated: GatedBackend
    ) -> None:
        """Cancellation removes the provisional entry and adds no error."""
        task = asyncio.create_task(ingestor.submit("hola"))
        await gated.first_chunk_sent.wait()
        await asyncio.sleep(0)
        check.is_not_none(ingestor.store.provisional)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        check.equal([e.role for e in ingestor.store], [EntryRole.USER])
        check.equal(ingestor.state, ExchangeState.IDLE)
        check.is_false(ingestor.is_busy())
