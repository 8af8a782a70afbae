"""Tests for Telegram command definitions."""

from album_maker.telegram_commands import BotCommand, find_command, telegram_commands


def test_telegram_commands_include_album() -> None:
    commands = telegram_commands()

    assert {
        "command": "album",
        "description": "Create albums from pending media now",
    } in commands
    assert len(commands) == len(list(BotCommand))


def test_find_command() -> None:
    assert find_command("/cancel") is BotCommand.CANCEL
    assert find_command("start") is BotCommand.START
    assert find_command("/nope") is None


def test_find_command_accepts_aliases() -> None:
    assert find_command("/sobre") is BotCommand.ABOUT
    assert find_command("/about") is BotCommand.ABOUT
    assert {"command": "sobre", "description": "About this bot"} not in (
        telegram_commands()
    )
