"""Best-effort user notifications."""

import logging

from album_maker.adapters.telegram_client import TelegramApiError, TelegramClient

logger = logging.getLogger(__name__)


async def notify(telegram_client: TelegramClient, chat_id: int, text: str) -> bool:
    """Send a text message, logging instead of raising on transport failure."""
    try:
        await telegram_client.send_message(chat_id=chat_id, text=text)
    except TelegramApiError:
        logger.exception("Failed to notify chat", extra={"chat_id": chat_id})
        return False
    return True
