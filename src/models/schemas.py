from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntryRole(str, Enum):
    """Roles a chat entry can take in the message log."""

    USER = "user"
    BOT_FINAL = "bot-final"
    BOT_PROVISIONAL = "bot-provisional"
    BOT_ERROR = "bot-final-error"


class ExchangeState(str, Enum):
    """Lifecycle states of a single request/response exchange."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


class ChatEntry(BaseModel):
    """One immutable snapshot of an entry in the chat log.

    Entries are never mutated once handed out. Updating a provisional
    response means swapping in a new snapshot.

    Attributes:
        id: Monotonically increasing key assigned by the store.
        text: The message text.
        role: Who produced the entry and whether it is final.
        created_at: When this snapshot was created.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    text: str
    role: EntryRole
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.role is EntryRole.USER

    @property
    def is_provisional(self) -> bool:
        return self.role is EntryRole.BOT_PROVISIONAL


class Attachment(BaseModel):
    """A file attached to a submission, sent as raw bytes.

    Attributes:
        filename: Name reported to the backend.
        content: Raw file bytes.
        content_type: MIME type of the part.
    """

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @field_validator("content_type", mode="before")
    @classmethod
    def default_content_type(cls, v: str | None) -> str:
        """Fall back to a generic binary type when none is known."""
        return v or "application/octet-stream"

    def as_multipart(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)
