"""HTTP client for the assistant streaming endpoint.

Responsibilities:
    - Multipart command submission with bearer authentication
    - Incremental decoding of the chunked plain-text response
    - Provisional/final reconciliation of the answer in the message store
    - Conversion of transport and read failures into a visible error entry

Built on httpx. Holds no UI code.
"""

from src.client.config import ClientConfig, get_client_config
from src.client.decoding import ChunkDecoder
from src.client.errors import ChatClientError, StreamReadError, TransportError
from src.client.ingestor import Exchange, StreamIngestor

__all__ = [
    "ChatClientError",
    "ChunkDecoder",
    "ClientConfig",
    "Exchange",
    "StreamIngestor",
    "StreamReadError",
    "TransportError",
    "get_client_config",
]
