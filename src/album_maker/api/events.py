"""Translation of Telegram messages into inbound events."""

from album_maker.api.telegram_models import TelegramMessage, TelegramPhotoSize
from album_maker.domain.events import CommandEvent, MediaEvent, ReplyTextEvent
from album_maker.domain.media import MediaKind

InboundEvent = CommandEvent | MediaEvent | ReplyTextEvent


def to_event(message: TelegramMessage) -> InboundEvent | None:
    """Map a message to the event the album services understand."""
    chat_id = message.chat.id
    if message.text and message.text.startswith("/"):
        username = message.from_user.username if message.from_user else None
        return CommandEvent(text=message.text, chat_id=chat_id, from_user=username)

    media = _media_event(message)
    if media is not None:
        return media

    if message.text and message.reply_to_message is not None:
        return ReplyTextEvent(
            text=message.text,
            chat_id=chat_id,
            replied_to_message_id=message.reply_to_message.message_id,
        )
    return None


def _media_event(message: TelegramMessage) -> MediaEvent | None:
    if message.photo:
        photo = _select_largest_photo(message.photo)
        return MediaEvent(
            kind=MediaKind.PHOTO.value,
            file_ref=photo.file_id,
            chat_id=message.chat.id,
            source_message_id=message.message_id,
        )
    for kind, attachment in (
        (MediaKind.VIDEO, message.video),
        (MediaKind.ANIMATION, message.animation),
        (MediaKind.DOCUMENT, message.document),
    ):
        if attachment is not None:
            return MediaEvent(
                kind=kind.value,
                file_ref=attachment.file_id,
                chat_id=message.chat.id,
                source_message_id=message.message_id,
                file_name=attachment.file_name or None,
            )
    return None


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(
        photos, key=lambda photo: (photo.file_size or 0, photo.width * photo.height)
    )
