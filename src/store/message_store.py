"""Ordered chat log with a single replaceable provisional entry.

The store is append-mostly. User and final entries are only ever added.
The one exception is the provisional bot entry, which is swapped out for a
fresh snapshot on every streamed update and finally promoted or dropped.
"""

import itertools
import logging
from collections.abc import Callable, Iterator

from src.models.schemas import ChatEntry, EntryRole

logger = logging.getLogger(__name__)

StoreListener = Callable[[tuple[ChatEntry, ...]], None]


class MessageStore:
    """Holds the ordered chat entries and notifies listeners on change.

    Listeners are called synchronously after every mutation that changed
    the log, with a tuple snapshot of all entries.
    """

    def __init__(self) -> None:
        self._entries: list[ChatEntry] = []
        self._ids = itertools.count(1)
        self._listeners: list[StoreListener] = []

    @property
    def entries(self) -> tuple[ChatEntry, ...]:
        return tuple(self._entries)

    @property
    def provisional(self) -> ChatEntry | None:
        """The in-progress bot entry, if one exists."""
        for entry in self._entries:
            if entry.is_provisional:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChatEntry]:
        return iter(self.entries)

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append(self, text: str, role: EntryRole) -> ChatEntry:
        """Add an entry at the end of the log.

        Args:
            text: Entry text.
            role: Entry role.

        Returns:
            The stored entry.
        """
        entry = self._new_entry(text, role)
        self._entries.append(entry)
        self._notify()
        return entry

    def replace_provisional(self, text: str) -> ChatEntry:
        """Swap the provisional entry for a fresh one holding ``text``.

        The new entry always gets a new id and goes at the end of the log,
        so its position tracks the latest update rather than the start of
        the stream.

        Args:
            text: Full text accumulated so far.

        Returns:
            The new provisional entry.
        """
        self._entries = [e for e in self._entries if not e.is_provisional]
        entry = self._new_entry(text, EntryRole.BOT_PROVISIONAL)
        self._entries.append(entry)
        self._notify()
        return entry

    def promote_provisional(self) -> ChatEntry | None:
        """Mark the provisional entry as final, keeping its id and position.

        Returns:
            The promoted entry, or None when there was nothing to promote.
        """
        for index, entry in enumerate(self._entries):
            if entry.is_provisional:
                promoted = entry.model_copy(update={"role": EntryRole.BOT_FINAL})
                self._entries[index] = promoted
                self._notify()
                return promoted
        return None

    def drop_provisional(self) -> ChatEntry | None:
        """Remove the provisional entry, if any.

        Returns:
            The removed entry, or None when there was none.
        """
        dropped = self.provisional
        if dropped is None:
            return None
        self._entries = [e for e in self._entries if not e.is_provisional]
        self._notify()
        return dropped

    def _new_entry(self, text: str, role: EntryRole) -> ChatEntry:
        return ChatEntry(id=next(self._ids), text=text, role=role)

    def _notify(self) -> None:
        snapshot = self.entries
        for listener in list(self._listeners):
            listener(snapshot)
