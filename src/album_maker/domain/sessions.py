"""Per-chat session state."""

import threading
from datetime import UTC, datetime, timedelta
from enum import Enum

from album_maker.domain.media import Album, MediaItem


class SessionState(Enum):
    """Lifecycle of a chat session."""

    IDLE = "IDLE"
    COLLECTING = "COLLECTING"
    AWAITING_CAPTION = "AWAITING_CAPTION"


class UserSession:
    """Pending media buffer and last album for one chat.

    The add path (inbound events) and the drain path (scheduled flush) run on
    different calling contexts, so every access to ``pending`` goes through
    the session lock.
    """

    def __init__(self, chat_id: int, now: datetime | None = None) -> None:
        self.chat_id = chat_id
        self.state = SessionState.IDLE
        self.last_album: Album | None = None
        self.last_activity = now or datetime.now(tz=UTC)
        self._pending: list[MediaItem] = []
        self._lock = threading.Lock()

    @property
    def pending(self) -> tuple[MediaItem, ...]:
        """Snapshot of the items awaiting batching, in arrival order."""
        with self._lock:
            return tuple(self._pending)

    def add_media(self, item: MediaItem) -> int:
        """Append an item and return the new buffer size."""
        with self._lock:
            self._pending.append(item)
            self.state = SessionState.COLLECTING
            self.touch()
            return len(self._pending)

    def drain_pending(self, minimum: int = 1) -> tuple[MediaItem, ...]:
        """Atomically take and clear the buffer.

        Returns an empty tuple and leaves the buffer untouched when it holds
        fewer than ``minimum`` items.
        """
        with self._lock:
            if len(self._pending) < minimum:
                return ()
            items = tuple(self._pending)
            self._pending.clear()
            return items

    def set_last_album(self, album: Album) -> None:
        """Record a dispatched album; it becomes the caption target."""
        self.last_album = album
        self.state = SessionState.AWAITING_CAPTION
        self.touch()

    def touch(self, now: datetime | None = None) -> None:
        self.last_activity = now or datetime.now(tz=UTC)

    def is_expired(self, idle_timeout: timedelta, now: datetime | None = None) -> bool:
        """Return true when the session has been idle longer than the timeout."""
        current = now or datetime.now(tz=UTC)
        return current - self.last_activity > idle_timeout

    def __repr__(self) -> str:
        return (
            f"UserSession(chat_id={self.chat_id}, state={self.state.name}, "
            f"pending={len(self.pending)})"
        )
