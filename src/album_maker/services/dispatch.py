"""Sending album chunks through Telegram and cleaning up the originals."""

import asyncio
import logging
from dataclasses import dataclass, field

from album_maker.adapters.telegram_client import TelegramApiError, TelegramClient
from album_maker.domain.albums import AlbumPlan
from album_maker.domain.media import Album, MediaItem
from album_maker.domain.sessions import UserSession
from album_maker.services.notifications import notify

logger = logging.getLogger(__name__)

SINGLE_ALBUM_CREATED = (
    "✅ Album created! Reply to the album with text to add a caption."
)
SEND_FAILED = "❌ Something went wrong while sending the album. Please try again."


def albums_created_message(count: int) -> str:
    if count == 1:
        return SINGLE_ALBUM_CREATED
    return f"✅ Created {count} albums! Reply to an album with text to add a caption."


@dataclass
class DispatchResult:
    """Outcome of sending one batch."""

    albums: list[Album]
    failed: bool
    dropped: tuple[MediaItem, ...] = ()
    cleanup: asyncio.Task[int] | None = None


@dataclass
class AlbumDispatcher:
    """Sends planned chunks as media groups, in order."""

    telegram_client: TelegramClient
    cleanup_delay_seconds: float = 1.0
    _cleanups: set[asyncio.Task[int]] = field(default_factory=set, init=False)

    async def dispatch(self, session: UserSession, plan: AlbumPlan) -> DispatchResult:
        """Send every chunk of the plan for the session's chat.

        A failing chunk notifies the user once per batch and marks the batch
        failed; later chunks are still attempted. Only a fully successful
        batch is confirmed and has its source messages deleted.
        """
        chat_id = session.chat_id
        total = len(plan.chunks)
        albums: list[Album] = []
        failed = False
        for number, chunk in enumerate(plan.chunks, start=1):
            logger.info(
                "Sending album %d/%d with %d items to chat %s",
                number,
                total,
                len(chunk),
                chat_id,
            )
            album = Album(items=chunk)
            try:
                sent_ids = await self.telegram_client.send_media_group(chat_id, chunk)
            except TelegramApiError:
                logger.exception(
                    "Failed to send album %d/%d",
                    number,
                    total,
                    extra={"chat_id": chat_id},
                )
                if not failed:
                    await notify(self.telegram_client, chat_id, SEND_FAILED)
                failed = True
                continue
            if not sent_ids:
                logger.error(
                    "Telegram returned no messages for album %d/%d",
                    number,
                    total,
                    extra={"chat_id": chat_id},
                )
                if not failed:
                    await notify(self.telegram_client, chat_id, SEND_FAILED)
                failed = True
                continue
            album.sent_message_id = sent_ids[0]
            session.set_last_album(album)
            albums.append(album)

        result = DispatchResult(albums=albums, failed=failed, dropped=plan.dropped)
        if failed or not albums:
            return result

        await notify(self.telegram_client, chat_id, albums_created_message(len(albums)))
        message_ids = [
            message_id for album in albums for message_id in album.source_message_ids
        ]
        if message_ids:
            result.cleanup = self._schedule_cleanup(chat_id, message_ids)
        return result

    def _schedule_cleanup(
        self, chat_id: int, message_ids: list[int]
    ) -> asyncio.Task[int]:
        task = asyncio.create_task(self._delete_originals(chat_id, message_ids))
        self._cleanups.add(task)
        task.add_done_callback(self._cleanups.discard)
        return task

    async def _delete_originals(self, chat_id: int, message_ids: list[int]) -> int:
        # The album must render client-side before the originals disappear.
        await asyncio.sleep(self.cleanup_delay_seconds)
        deleted = 0
        for message_id in message_ids:
            try:
                if await self.telegram_client.delete_message(chat_id, message_id):
                    deleted += 1
            except TelegramApiError:
                logger.warning(
                    "Could not delete message %s",
                    message_id,
                    exc_info=True,
                    extra={"chat_id": chat_id},
                )
        logger.info(
            "Deleted %d of %d original messages in chat %s",
            deleted,
            len(message_ids),
            chat_id,
        )
        return deleted

    async def close(self) -> None:
        """Cancel cleanups that have not finished yet."""
        pending = list(self._cleanups)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
