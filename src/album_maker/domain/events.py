"""Inbound events delivered to the album services."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandEvent:
    """A slash command typed by the user."""

    text: str
    chat_id: int
    from_user: str | None = None

    @property
    def command(self) -> str:
        """Lower-cased command word without the bot mention suffix."""
        word = self.text.split(maxsplit=1)[0] if self.text.strip() else ""
        return word.split("@", maxsplit=1)[0].lower()


@dataclass(frozen=True)
class MediaEvent:
    """A message carrying one media attachment."""

    kind: str
    file_ref: str
    chat_id: int
    source_message_id: int | None
    file_name: str | None = None


@dataclass(frozen=True)
class ReplyTextEvent:
    """A text message sent as a reply to another message."""

    text: str
    chat_id: int
    replied_to_message_id: int
