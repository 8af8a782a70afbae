"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from album_maker.adapters.telegram_client import HttpxTelegramClient, TelegramApiError
from album_maker.domain.media import MediaKind
from tests.conftest import make_item


def _client(handler) -> HttpxTelegramClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    return HttpxTelegramClient(bot_token="token", http_client=async_client)


def test_telegram_client_send_message() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/sendMessage")
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    asyncio.run(_client(handler).send_message(chat_id=1, text="Hi"))

    assert seen == [{"chat_id": 1, "text": "Hi"}]


def test_telegram_client_send_media_group_returns_ids() -> None:
    payloads: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/sendMediaGroup")
        payloads.append(json.loads(request.content.decode()))
        return httpx.Response(
            200,
            json={"ok": True, "result": [{"message_id": 70}, {"message_id": 71}]},
        )

    items = [make_item(1), make_item(2, kind=MediaKind.VIDEO)]

    ids = asyncio.run(_client(handler).send_media_group(5, items))

    assert ids == [70, 71]
    assert payloads[0]["media"] == [
        {"type": "photo", "media": "file-1"},
        {"type": "video", "media": "file-2"},
    ]


def test_telegram_client_rejects_invalid_group_size() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(TelegramApiError):
        asyncio.run(_client(handler).send_media_group(5, [make_item(1)]))


def test_telegram_client_raises_on_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"ok": False, "description": "Bad Request: message can't be edited"},
        )

    with pytest.raises(TelegramApiError) as excinfo:
        asyncio.run(_client(handler).edit_message_caption(5, 100, "caption"))

    assert excinfo.value.method == "editMessageCaption"
    assert "can't be edited" in excinfo.value.description


def test_telegram_client_raises_on_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TelegramApiError):
        asyncio.run(_client(handler).delete_message(5, 10))


def test_telegram_client_delete_and_edit() -> None:
    seen: dict[str, dict[str, object]] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", maxsplit=1)[-1]
        seen[method] = json.loads(request.content.decode())
        return httpx.Response(200, json={"ok": True, "result": True})

    client = _client(handler)

    deleted = asyncio.run(client.delete_message(5, 10))
    asyncio.run(client.edit_message_caption(5, 100, "Summer"))

    assert deleted is True
    assert seen["deleteMessage"] == {"chat_id": 5, "message_id": 10}
    assert seen["editMessageCaption"] == {
        "chat_id": 5,
        "message_id": 100,
        "caption": "Summer",
    }


def test_telegram_client_commands_and_menu_button() -> None:
    seen_paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_paths.append(request.url.path)
        payload = json.loads(request.content.decode())
        if request.url.path.endswith("/setMyCommands"):
            assert payload["commands"][0]["command"] == "start"
        if request.url.path.endswith("/setChatMenuButton"):
            assert payload["menu_button"]["type"] == "commands"
        return httpx.Response(200, json={"ok": True, "result": True})

    client = _client(handler)

    asyncio.run(
        client.set_my_commands([{"command": "start", "description": "Welcome"}])
    )
    asyncio.run(client.set_chat_menu_button({"type": "commands"}))

    assert any(path.endswith("/setMyCommands") for path in seen_paths)
    assert any(path.endswith("/setChatMenuButton") for path in seen_paths)
