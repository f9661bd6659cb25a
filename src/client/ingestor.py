"""Streaming exchange with the assistant backend.

Sends one multipart command, reads the plain-text response body chunk by
chunk, and mirrors the growing answer into the message store.

State machine:

    idle -> sending -> streaming -> done
               |           |
               +-> failed <+

Every chunk that decodes to text replaces the provisional bot entry with the
full text received so far. At end of stream the provisional entry is
promoted to final. On any
failure it is dropped and a single error entry is appended instead, so a
truncated answer is never shown as if it were complete.

Submissions made while an exchange is in flight are rejected.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from types import TracebackType

import httpx

from src.client.config import ClientConfig, get_client_config
from src.client.decoding import ChunkDecoder
from src.client.errors import ChatClientError, StreamReadError, TransportError
from src.models.schemas import Attachment, EntryRole, ExchangeState
from src.store.message_store import MessageStore, StoreListener

logger = logging.getLogger(__name__)

StateListener = Callable[[ExchangeState], None]

_BUSY_STATES = frozenset({ExchangeState.SENDING, ExchangeState.STREAMING})


@dataclass
class Exchange:
    """Transient state of one submit-to-completion cycle.

    Attributes:
        command: Command text as typed.
        files: Attachments sent with the command.
        decoder: Stateful decoder for the response body.
        text: Accumulated decoded response text.
        chunks: Number of body chunks received.
    """

    command: str
    files: list[Attachment]
    decoder: ChunkDecoder = field(default_factory=ChunkDecoder)
    text: str = ""
    chunks: int = 0

    def absorb(self, chunk: bytes) -> str:
        """Decode a body chunk and append it to the accumulated text.

        Returns:
            The newly decoded piece, empty while a character is incomplete.
        """
        self.chunks += 1
        piece = self.decoder.feed(chunk)
        self.text += piece
        return piece

    def finish(self) -> str:
        """Flush the decoder and return any trailing text."""
        tail = self.decoder.flush()
        self.text += tail
        return tail

    def multipart_fields(self) -> list[tuple[str, tuple]]:
        """Build the form fields: ``command`` plus one ``upload_files`` per file.

        The command is sent as a filename-less part so the body is always
        multipart, even without attachments.
        """
        fields: list[tuple[str, tuple]] = [("command", (None, self.command.encode("utf-8")))]
        fields.extend(("upload_files", f.as_multipart()) for f in self.files)
        return fields


class StreamIngestor:
    """Runs exchanges against the assistant and feeds the message store.

    Entry point for the presentation layer: ``submit`` to send,
    ``on_store_changed`` to re-render, ``is_busy`` for the thinking
    indicator.
    """

    def __init__(
        self,
        store: MessageStore | None = None,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the ingestor.

        Args:
            store: Message store to write into. A new one is created if omitted.
            config: Client configuration. Loads from environment if not provided.
            client: Optional shared HTTP client. When omitted the ingestor
                    creates and owns one.
        """
        self._store = store if store is not None else MessageStore()
        self._config = config or get_client_config()
        self._timeout = httpx.Timeout(
            self._config.idle_timeout, connect=self._config.connect_timeout
        )
        self._client = client
        self._owns_client = client is None
        self._state = ExchangeState.IDLE
        self._state_listeners: list[StateListener] = []

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def state(self) -> ExchangeState:
        return self._state

    def is_busy(self) -> bool:
        """Whether an exchange is being sent or streamed."""
        return self._state in _BUSY_STATES

    def on_store_changed(self, listener: StoreListener) -> None:
        self._store.subscribe(listener)

    def on_state_changed(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    async def submit(self, command_text: str, files: Iterable[Attachment] = ()) -> bool:
        """Send a command and stream the answer into the store.

        Failures never propagate: they end as a single error entry.

        Args:
            command_text: Text typed by the user (may be empty if files are attached).
            files: Attachments to upload alongside the command.

        Returns:
            True if an exchange ran, False if the submission was empty or
            another exchange was still in flight.
        """
        attachments = list(files)
        if not command_text.strip() and not attachments:
            return False

        if self.is_busy():
            logger.info("Submission rejected: an exchange is already in flight")
            return False

        self._set_state(ExchangeState.SENDING)
        if command_text.strip():
            self._store.append(command_text, EntryRole.USER)

        exchange = Exchange(command=command_text, files=attachments)
        logger.info(
            f"Sending command ({len(command_text)} chars, {len(attachments)} files) "
            f"to {self._config.endpoint_url}"
        )

        try:
            await self._run(exchange)
        except ChatClientError as e:
            logger.warning(f"Exchange failed after {exchange.chunks} chunks: {e}")
            self._fail()
        except asyncio.CancelledError:
            logger.info(f"Exchange cancelled after {exchange.chunks} chunks")
            self._store.drop_provisional()
            self._set_state(ExchangeState.IDLE)
            raise
        except Exception:
            logger.exception("Unexpected error during exchange")
            self._fail()
        else:
            self._store.promote_provisional()
            self._set_state(ExchangeState.DONE)
            logger.info(
                f"Exchange complete: {exchange.chunks} chunks, {len(exchange.text)} chars"
            )
        return True

    async def _run(self, exchange: Exchange) -> None:
        """Send the request and ingest the response body.

        Raises:
            TransportError: If the request fails or the status is not 2xx.
            StreamReadError: If reading the body fails once it was opened.
        """
        client = self._get_client()
        try:
            async with client.stream(
                "POST",
                self._config.endpoint_url,
                files=exchange.multipart_fields(),
                headers=self._config.auth_header,
                timeout=self._timeout,
            ) as response:
                self._check_status(response)
                self._set_state(ExchangeState.STREAMING)

                async for chunk in response.aiter_bytes():
                    piece = exchange.absorb(chunk)
                    logger.debug(f"Chunk {exchange.chunks}: {len(chunk)} bytes")
                    if piece:
                        self._store.replace_provisional(exchange.text)

                if exchange.finish():
                    self._store.replace_provisional(exchange.text)
        except httpx.HTTPError as e:
            if self._state is ExchangeState.STREAMING:
                raise StreamReadError(f"Reading response failed: {e!r}") from e
            raise TransportError(f"Request failed: {e!r}") from e

    @staticmethod
    def _check_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"HTTP {response.status_code}", status_code=response.status_code
            ) from e

    def _fail(self) -> None:
        self._store.drop_provisional()
        self._store.append(self._config.error_message, EntryRole.BOT_ERROR)
        self._set_state(ExchangeState.FAILED)

    def _set_state(self, state: ExchangeState) -> None:
        if state is self._state:
            return
        logger.debug(f"Exchange state {self._state.value} -> {state.value}")
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this ingestor created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "StreamIngestor":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
