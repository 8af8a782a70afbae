"""Command handlers for Telegram updates."""

import logging
from dataclasses import dataclass

from album_maker.adapters.telegram_client import TelegramClient
from album_maker.domain.events import CommandEvent
from album_maker.services.albums import AlbumService
from album_maker.services.notifications import notify
from album_maker.telegram_commands import BotCommand, find_command

logger = logging.getLogger(__name__)

WELCOME = (
    "👋 Welcome to Album Maker!\n\n"
    "This bot turns the media you send into albums.\n\n"
    "To get started:\n"
    "1. Send several photos and/or videos\n"
    "2. Wait a few seconds while the album is created\n"
    "3. Reply to the album with the text you want as its caption\n\n"
    "Use /help to see all commands."
)
HELP = (
    "Available commands:\n\n"
    "/start - Show the welcome message\n"
    "/help - Show this help\n"
    "/album - Create albums from pending media right away\n"
    "/cancel - Discard pending media\n"
    "/about (or /sobre) - About this bot\n\n"
    "Albums hold up to 10 items. Send at least 2 media files, wait a few "
    "seconds, then reply to the album to caption it."
)
ABOUT = (
    "📱 Album Maker\n\n"
    "Groups your photos, videos, GIFs and documents into albums and lets you "
    "caption them by replying."
)
CANCELLED = "✅ Cancelled. Send media to start a new album."
NOTHING_PENDING = "ℹ️ There is no pending media. Send some photos or videos first."
UNKNOWN_COMMAND = "Command not recognized. Use /help to see the available commands."


@dataclass
class CommandHandler:
    """Handle slash commands."""

    album_service: AlbumService
    telegram_client: TelegramClient

    async def handle(self, event: CommandEvent) -> None:
        """Dispatch a command event to its handler."""
        logger.info("Command %s from %s", event.command, event.from_user)
        command = find_command(event.command)
        chat_id = event.chat_id
        if command is BotCommand.START:
            await notify(self.telegram_client, chat_id, WELCOME)
        elif command is BotCommand.HELP:
            await notify(self.telegram_client, chat_id, HELP)
        elif command is BotCommand.ABOUT:
            await notify(self.telegram_client, chat_id, ABOUT)
        elif command is BotCommand.CANCEL:
            self.album_service.reset(chat_id)
            await notify(self.telegram_client, chat_id, CANCELLED)
        elif command is BotCommand.ALBUM:
            session = self.album_service.session_store.get(chat_id)
            if session is None or not session.pending:
                await notify(self.telegram_client, chat_id, NOTHING_PENDING)
                return
            await self.album_service.create_albums_now(chat_id)
        else:
            await notify(self.telegram_client, chat_id, UNKNOWN_COMMAND)
