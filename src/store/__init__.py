"""In-memory chat log for the current page session.

Responsibilities:
    - Ordered storage of user, bot and error entries
    - Replacement rule for the single provisional bot entry
    - Change notifications for the rendering layer

Nothing is persisted. The log lives as long as the page that owns it.
"""

from src.store.message_store import MessageStore, StoreListener

__all__ = ["MessageStore", "StoreListener"]
