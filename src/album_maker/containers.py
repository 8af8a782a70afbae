"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from album_maker.adapters.telegram_client import HttpxTelegramClient, TelegramClient
from album_maker.config import Settings
from album_maker.services.albums import AlbumService
from album_maker.services.captions import CaptionBinder
from album_maker.services.commands import CommandHandler
from album_maker.services.dispatch import AlbumDispatcher
from album_maker.services.sessions import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    session_store: SessionStore
    album_service: AlbumService
    command_handler: CommandHandler
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings, telegram_client: TelegramClient
) -> tuple[SessionStore, AlbumService, CommandHandler]:
    """Wire the album services around a Telegram client."""
    session_store = SessionStore(
        idle_timeout=settings.session_idle_timeout,
        sweep_interval=settings.session_sweep_interval,
    )
    album_service = AlbumService(
        session_store=session_store,
        telegram_client=telegram_client,
        dispatcher=AlbumDispatcher(
            telegram_client=telegram_client,
            cleanup_delay_seconds=settings.cleanup_delay_seconds,
        ),
        caption_binder=CaptionBinder(
            session_store=session_store, telegram_client=telegram_client
        ),
        debounce_seconds=settings.album_debounce_seconds,
        max_per_album=settings.max_media_per_album,
    )
    command_handler = CommandHandler(
        album_service=album_service, telegram_client=telegram_client
    )
    return session_store, album_service, command_handler


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    session_store, album_service, command_handler = build_services(
        resolved_settings, telegram_client
    )

    async def close_resources() -> None:
        await session_store.stop_reaper()
        await album_service.close(resolved_settings.shutdown_grace_seconds)
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        session_store=session_store,
        album_service=album_service,
        command_handler=command_handler,
        close_resources=close_resources,
    )
