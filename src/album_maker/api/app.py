"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from album_maker.api.events import to_event
from album_maker.api.telegram_models import TelegramUpdate
from album_maker.app_logging import configure_logging
from album_maker.config import parse_allowed_user_ids
from album_maker.containers import AppContainer
from album_maker.domain.events import CommandEvent, MediaEvent, ReplyTextEvent
from album_maker.services.notifications import notify
from album_maker.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

USAGE_HINT = (
    "Send media files (photos, videos) to create an album, "
    "or use /help to see the available commands."
)
NOT_ALLOWED = "This bot is private."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            await state_container.telegram_client.set_my_commands(telegram_commands())
            await state_container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        state_container.session_store.start_reaper()
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None:
            return {"status": "ok"}
        chat_id = message.chat.id
        user_id = message.from_user.id if message.from_user else None
        if user_id is not None and not _is_user_allowed(user_id, allowed_user_ids):
            await notify(state_container.telegram_client, chat_id, NOT_ALLOWED)
            return {"status": "ok"}

        event = to_event(message)
        try:
            if isinstance(event, CommandEvent):
                await state_container.command_handler.handle(event)
            elif isinstance(event, MediaEvent):
                await state_container.album_service.handle_media(event)
            elif isinstance(event, ReplyTextEvent):
                await state_container.album_service.handle_caption(event)
            elif message.text:
                await notify(state_container.telegram_client, chat_id, USAGE_HINT)
        except Exception:
            logger.exception(
                "Failed to process update %s",
                update.update_id,
                extra={"chat_id": chat_id},
            )
        return {"status": "ok"}

    return app


def _is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return true when the user is allowed to interact with the bot."""
    return allowed is None or user_id in allowed
