"""Pydantic models shared by the store, the client and the UI.

Models:
    - ChatEntry: Immutable snapshot of one message in the chat log
    - EntryRole: user, final bot, provisional bot or error entry
    - ExchangeState: Lifecycle of a single request/response exchange
    - Attachment: Raw file bytes attached to a submission
"""

from src.models.schemas import Attachment, ChatEntry, EntryRole, ExchangeState

__all__ = ["Attachment", "ChatEntry", "EntryRole", "ExchangeState"]
