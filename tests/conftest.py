"""Shared test fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from album_maker.adapters.telegram_client import TelegramApiError, TelegramClient
from album_maker.config import Settings
from album_maker.containers import AppContainer, build_services
from album_maker.domain.media import MediaItem, MediaKind


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records every call."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    media_groups: list[tuple[int, list[MediaItem]]] = field(default_factory=list)
    captions: list[tuple[int, int, str]] = field(default_factory=list)
    deleted: list[tuple[int, int]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None
    failing_media_group_calls: set[int] = field(default_factory=set)
    failing_deletes: set[int] = field(default_factory=set)
    fail_caption_edit: bool = False
    next_message_id: int = 100
    send_delay: float = 0.0
    in_flight: int = 0
    peak_in_flight: int = 0

    async def send_message(self, chat_id: int, text: str) -> None:
        self.messages.append((chat_id, text))

    async def send_media_group(
        self, chat_id: int, items: Sequence[MediaItem]
    ) -> list[int]:
        self.media_groups.append((chat_id, list(items)))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.send_delay)
        finally:
            self.in_flight -= 1
        if len(self.media_groups) in self.failing_media_group_calls:
            raise TelegramApiError("sendMediaGroup", "Bad Request")
        first = self.next_message_id
        self.next_message_id += len(items)
        return list(range(first, first + len(items)))

    async def edit_message_caption(
        self, chat_id: int, message_id: int, caption: str
    ) -> None:
        if self.fail_caption_edit:
            raise TelegramApiError("editMessageCaption", "message can't be edited")
        self.captions.append((chat_id, message_id, caption))

    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        if message_id in self.failing_deletes:
            raise TelegramApiError("deleteMessage", "message to delete not found")
        self.deleted.append((chat_id, message_id))
        return True

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button

    def texts_for(self, chat_id: int) -> list[str]:
        return [text for target, text in self.messages if target == chat_id]


def make_item(
    number: int, kind: MediaKind = MediaKind.PHOTO, message_id: int | None = None
) -> MediaItem:
    """Build a media item whose source message id defaults to its number."""
    return MediaItem(
        file_ref=f"file-{number}",
        display_name=f"photo_{number}.jpg",
        kind=kind,
        source_message_id=number if message_id is None else message_id,
    )


def make_container(
    settings: Settings, telegram_client: FakeTelegramClient
) -> AppContainer:
    session_store, album_service, command_handler = build_services(
        settings, telegram_client
    )

    async def close_resources() -> None:
        await session_store.stop_reaper()
        await album_service.close(grace_seconds=0.1)

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        session_store=session_store,
        album_service=album_service,
        command_handler=command_handler,
        close_resources=close_resources,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        album_debounce_seconds=0.05,
        cleanup_delay_seconds=0,
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings, telegram_client: FakeTelegramClient
) -> AppContainer:
    return make_container(settings, telegram_client)
