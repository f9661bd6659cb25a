"""Errors raised while running an exchange with the assistant backend."""


class ChatClientError(Exception):
    """Base class for exchange failures."""

    pass


class TransportError(ChatClientError):
    """Raised when the request cannot be sent or the response cannot be opened.

    Covers connection, DNS and TLS failures as well as non-success statuses.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StreamReadError(ChatClientError):
    """Raised when reading the response body fails after it was opened."""

    pass
