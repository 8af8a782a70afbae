"""Telegram API client adapter."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

from album_maker.domain.media import MediaItem, MediaKind

_INPUT_MEDIA_TYPES: dict[MediaKind, str] = {
    MediaKind.PHOTO: "photo",
    MediaKind.VIDEO: "video",
    MediaKind.ANIMATION: "animation",
    MediaKind.DOCUMENT: "document",
}


class TelegramApiError(RuntimeError):
    """Raised when a Bot API call fails at the HTTP or API level."""

    def __init__(self, method: str, description: str) -> None:
        super().__init__(f"{method} failed: {description}")
        self.method = method
        self.description = description


class TelegramClient(Protocol):
    """Interface for Telegram API interactions."""

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send a text message to a Telegram chat."""

    async def send_media_group(
        self, chat_id: int, items: Sequence[MediaItem]
    ) -> list[int]:
        """Send 2-10 items as one media group and return the sent message ids."""

    async def edit_message_caption(
        self, chat_id: int, message_id: int, caption: str
    ) -> None:
        """Replace the caption of a sent message."""

    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        """Delete a message, returning whether Telegram reported success."""

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""


def input_media(item: MediaItem) -> dict[str, str]:
    """Build the InputMedia payload for a media item."""
    return {"type": _INPUT_MEDIA_TYPES[item.kind], "media": item.file_ref}


@dataclass
class HttpxTelegramClient:
    """Telegram client implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramClient":
        """Create a Telegram client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def _call(self, method: str, payload: dict[str, object]) -> object:
        """POST a Bot API method and return its ``result`` field."""
        url = f"https://api.telegram.org/bot{self.bot_token}/{method}"
        try:
            response = await self.http_client.post(url, json=payload, timeout=10)
        except httpx.HTTPError as exc:
            raise TelegramApiError(method, str(exc) or type(exc).__name__) from exc
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_error or not body.get("ok", False):
            description = body.get("description") or f"HTTP {response.status_code}"
            raise TelegramApiError(method, str(description))
        return body.get("result")

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send a message using Telegram's sendMessage API."""
        await self._call("sendMessage", {"chat_id": chat_id, "text": text})

    async def send_media_group(
        self, chat_id: int, items: Sequence[MediaItem]
    ) -> list[int]:
        """Send a media group and return the ids of the created messages."""
        if not 2 <= len(items) <= 10:
            raise TelegramApiError(
                "sendMediaGroup", f"media group needs 2-10 items, got {len(items)}"
            )
        result = await self._call(
            "sendMediaGroup",
            {"chat_id": chat_id, "media": [input_media(item) for item in items]},
        )
        if not isinstance(result, list):
            return []
        return [int(message["message_id"]) for message in result]

    async def edit_message_caption(
        self, chat_id: int, message_id: int, caption: str
    ) -> None:
        """Edit a caption using Telegram's editMessageCaption API."""
        await self._call(
            "editMessageCaption",
            {"chat_id": chat_id, "message_id": message_id, "caption": caption},
        )

    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        """Delete a message using Telegram's deleteMessage API."""
        result = await self._call(
            "deleteMessage", {"chat_id": chat_id, "message_id": message_id}
        )
        return result is True

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""
        await self._call("setMyCommands", {"commands": commands})

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""
        await self._call(
            "setChatMenuButton", {"menu_button": menu_button or {"type": "commands"}}
        )
