"""In-memory registry of chat sessions with idle eviction."""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from album_maker.domain.sessions import UserSession

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """Owns every UserSession, keyed by chat id.

    Sessions are a soft cache: a sweep may evict a session that still holds
    pending media, in which case those items are lost.
    """

    idle_timeout: timedelta = timedelta(minutes=30)
    sweep_interval: timedelta = timedelta(minutes=10)
    _sessions: dict[int, UserSession] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _reaper: asyncio.Task[None] | None = field(default=None, init=False)

    def get_or_create(self, chat_id: int) -> UserSession:
        """Return the chat's session, creating it exactly once."""
        with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = UserSession(chat_id)
                self._sessions[chat_id] = session
                logger.info("Created session for chat %s", chat_id)
            return session

    def get(self, chat_id: int) -> UserSession | None:
        with self._lock:
            return self._sessions.get(chat_id)

    def remove(self, chat_id: int) -> UserSession | None:
        """Drop the chat's session, returning it if it existed."""
        with self._lock:
            session = self._sessions.pop(chat_id, None)
        if session is not None:
            logger.info("Removed session for chat %s", chat_id)
        return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def sweep(self, now: datetime | None = None) -> list[int]:
        """Evict sessions idle for longer than ``idle_timeout``."""
        current = now or datetime.now(tz=UTC)
        evicted: list[int] = []
        with self._lock:
            for chat_id, session in list(self._sessions.items()):
                if session.is_expired(self.idle_timeout, current):
                    del self._sessions[chat_id]
                    evicted.append(chat_id)
            remaining = len(self._sessions)
        for chat_id in evicted:
            logger.info("Evicted idle session for chat %s", chat_id)
        logger.info(
            "Session sweep finished: %d evicted, %d active", len(evicted), remaining
        )
        return evicted

    def start_reaper(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._reaper is not None and not self._reaper.done():
            return
        self._reaper = asyncio.create_task(self._reap_forever())

    async def stop_reaper(self) -> None:
        if self._reaper is None:
            return
        self._reaper.cancel()
        try:
            await self._reaper
        except asyncio.CancelledError:
            pass
        self._reaper = None

    async def _reap_forever(self) -> None:
        interval = self.sweep_interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep()
            except Exception:
                logger.exception("Session sweep failed")
