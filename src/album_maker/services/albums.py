"""Album collection workflow exposed to the command layer."""

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field

from album_maker.adapters.telegram_client import TelegramClient
from album_maker.domain.albums import (
    MAX_MEDIA_PER_ALBUM,
    MIN_MEDIA_PER_ALBUM,
    partition,
)
from album_maker.domain.events import MediaEvent, ReplyTextEvent
from album_maker.domain.media import MediaItem, MediaKind
from album_maker.services.captions import CaptionBinder, CaptionOutcome
from album_maker.services.dispatch import AlbumDispatcher, DispatchResult
from album_maker.services.notifications import notify
from album_maker.services.scheduler import BatchScheduler
from album_maker.services.sessions import SessionStore

logger = logging.getLogger(__name__)

NEED_MORE_MEDIA = (
    "ℹ️ To create an album you need to send at least 2 media files. "
    "Send more and the album will be created automatically."
)
UNSUPPORTED_MEDIA = "❌ Sorry, I couldn't process this type of media."
FLUSH_FAILED = "❌ Something went wrong while creating the album. Please try again."


@dataclass
class AlbumService:
    """Collects media per chat and turns it into albums after a quiet period."""

    session_store: SessionStore
    telegram_client: TelegramClient
    dispatcher: AlbumDispatcher
    caption_binder: CaptionBinder
    debounce_seconds: float = 3.0
    max_per_album: int = MAX_MEDIA_PER_ALBUM
    scheduler: BatchScheduler = field(init=False)

    def __post_init__(self) -> None:
        self.scheduler = BatchScheduler(on_error=self._on_flush_error)

    async def handle_media(self, event: MediaEvent) -> MediaItem | None:
        """Buffer an inbound media message and restart the chat's quiet period."""
        item = _to_media_item(event)
        if item is None:
            logger.warning(
                "Skipping unsupported media kind %r",
                event.kind,
                extra={"chat_id": event.chat_id},
            )
            await notify(self.telegram_client, event.chat_id, UNSUPPORTED_MEDIA)
            return None

        session = self.session_store.get_or_create(event.chat_id)
        size = session.add_media(item)
        logger.info("Media added for chat %s, %d pending", event.chat_id, size)
        chat_id = event.chat_id
        self.scheduler.reschedule(
            chat_id, self.debounce_seconds, lambda: self.flush(chat_id)
        )
        return item

    async def create_albums_now(self, chat_id: int) -> DispatchResult | None:
        """Skip the quiet period and flush the chat's pending media."""
        return await self.scheduler.run_now(chat_id, lambda: self.flush(chat_id))

    async def handle_caption(self, event: ReplyTextEvent) -> CaptionOutcome:
        return await self.caption_binder.apply(event)

    def reset(self, chat_id: int) -> bool:
        """Cancel any pending flush and forget the chat's session."""
        self.scheduler.cancel(chat_id)
        return self.session_store.remove(chat_id) is not None

    async def flush(self, chat_id: int) -> DispatchResult | None:
        """Turn the chat's pending media into albums.

        A single pending item stays buffered so a later upload can complete
        the batch.
        """
        session = self.session_store.get(chat_id)
        if session is None or not session.pending:
            logger.warning(
                "Flush requested with no pending media for chat %s", chat_id
            )
            return None

        items = session.drain_pending(minimum=MIN_MEDIA_PER_ALBUM)
        if not items:
            logger.info("Only one media item pending for chat %s", chat_id)
            await notify(self.telegram_client, chat_id, NEED_MORE_MEDIA)
            return None

        plan = partition(items, self.max_per_album)
        logger.info(
            "Creating %d album(s) from %d items for chat %s",
            len(plan.chunks),
            plan.total,
            chat_id,
        )
        return await self.dispatcher.dispatch(session, plan)

    async def _on_flush_error(self, key: Hashable, exc: Exception) -> None:
        if isinstance(key, int):
            await notify(self.telegram_client, key, FLUSH_FAILED)

    async def close(self, grace_seconds: float = 5.0) -> None:
        await self.scheduler.shutdown(grace_seconds)
        await self.dispatcher.close()


def _to_media_item(event: MediaEvent) -> MediaItem | None:
    try:
        kind = MediaKind(event.kind)
    except ValueError:
        return None
    return MediaItem(
        file_ref=event.file_ref,
        display_name=event.file_name or default_display_name(kind, event.file_ref),
        kind=kind,
        source_message_id=event.source_message_id,
    )


def default_display_name(kind: MediaKind, file_ref: str) -> str:
    """Name used when Telegram does not supply one."""
    prefix = file_ref[:10]
    suffixes = {
        MediaKind.PHOTO: ".jpg",
        MediaKind.VIDEO: ".mp4",
        MediaKind.ANIMATION: ".gif",
        MediaKind.DOCUMENT: "",
    }
    return f"{kind.value}_{prefix}{suffixes[kind]}"
