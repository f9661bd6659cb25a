"""Incremental UTF-8 decoding for chunked response bodies.

Chunk boundaries from the network do not line up with character boundaries.
A multi-byte character may arrive split over two reads, so the decoder keeps
incomplete trailing bytes until the rest of the sequence shows up.
"""

import codecs
import logging

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "�"


class ChunkDecoder:
    """Stateful decoder turning byte chunks into text.

    Invalid bytes decode to U+FFFD rather than raising, so a bad byte in
    the body never aborts the exchange.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    @property
    def pending(self) -> bool:
        """Whether bytes of an incomplete character are buffered."""
        buffered, _ = self._decoder.getstate()
        return bool(buffered)

    def feed(self, chunk: bytes) -> str:
        """Decode a chunk, holding back any incomplete trailing sequence.

        Args:
            chunk: Raw bytes as received.

        Returns:
            Text that could be fully decoded so far (may be empty).
        """
        return self._decoder.decode(chunk)

    def flush(self) -> str:
        """Finish decoding at end of stream.

        Returns:
            Remaining text. A truncated sequence becomes U+FFFD.
        """
        text = self._decoder.decode(b"", final=True)
        if REPLACEMENT_CHAR in text:
            logger.warning("Response body ended inside a multi-byte character")
        return text
