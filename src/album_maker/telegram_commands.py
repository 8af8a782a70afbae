"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str
    aliases: tuple[str, ...] = ()


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Welcome and quick start")
    HELP = TelegramCommand("help", "How to build albums")
    ALBUM = TelegramCommand("album", "Create albums from pending media now")
    CANCEL = TelegramCommand("cancel", "Discard pending media and start over")
    ABOUT = TelegramCommand("about", "About this bot", aliases=("sobre",))


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def find_command(word: str) -> BotCommand | None:
    """Look up a command by its slash-prefixed word."""
    name = word.removeprefix("/")
    for entry in BotCommand:
        if name == entry.value.command or name in entry.value.aliases:
            return entry
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
