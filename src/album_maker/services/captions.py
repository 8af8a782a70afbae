"""Attaching captions to the most recent album."""

import logging
from dataclasses import dataclass
from enum import Enum

from album_maker.adapters.telegram_client import TelegramApiError, TelegramClient
from album_maker.domain.events import ReplyTextEvent
from album_maker.services.notifications import notify
from album_maker.services.sessions import SessionStore

logger = logging.getLogger(__name__)

NO_ACTIVE_ALBUM = "❌ I couldn't find a recent album to add the caption to."
CAPTION_MISMATCH = "❌ Please reply directly to the album to add a caption."
CAPTION_UPDATED = "✅ Caption added!"
CAPTION_FAILED = "❌ Something went wrong while adding the caption. Please try again."


class CaptionOutcome(Enum):
    """Result of a caption reply."""

    APPLIED = "APPLIED"
    NO_ACTIVE_ALBUM = "NO_ACTIVE_ALBUM"
    MISMATCH = "MISMATCH"
    FAILED = "FAILED"


@dataclass
class CaptionBinder:
    """Applies reply text as the caption of the chat's last album.

    Telegram only allows editing the caption of the first message of a
    media group, so the edit targets ``Album.sent_message_id``.
    """

    session_store: SessionStore
    telegram_client: TelegramClient

    async def apply(self, event: ReplyTextEvent) -> CaptionOutcome:
        chat_id = event.chat_id
        session = self.session_store.get(chat_id)
        album = session.last_album if session else None
        if session is None or album is None:
            await notify(self.telegram_client, chat_id, NO_ACTIVE_ALBUM)
            return CaptionOutcome.NO_ACTIVE_ALBUM

        if album.sent_message_id != event.replied_to_message_id:
            logger.info(
                "Reply to %s does not target last album %s in chat %s",
                event.replied_to_message_id,
                album.sent_message_id,
                chat_id,
            )
            await notify(self.telegram_client, chat_id, CAPTION_MISMATCH)
            return CaptionOutcome.MISMATCH

        album.caption = event.text
        session.touch()
        try:
            await self.telegram_client.edit_message_caption(
                chat_id, album.sent_message_id, event.text
            )
        except TelegramApiError:
            logger.exception(
                "Failed to update caption for album %s",
                album.id,
                extra={"chat_id": chat_id},
            )
            await notify(self.telegram_client, chat_id, CAPTION_FAILED)
            return CaptionOutcome.FAILED
        logger.info("Caption updated for album %s in chat %s", album.id, chat_id)
        await notify(self.telegram_client, chat_id, CAPTION_UPDATED)
        return CaptionOutcome.APPLIED
