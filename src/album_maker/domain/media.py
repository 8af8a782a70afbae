"""Domain models for received media and dispatched albums."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class MediaKind(Enum):
    """Media kinds that can be grouped into an album."""

    PHOTO = "photo"
    VIDEO = "video"
    ANIMATION = "animation"
    DOCUMENT = "document"


@dataclass(frozen=True)
class MediaItem:
    """A single media reference received from a chat."""

    file_ref: str
    display_name: str
    kind: MediaKind
    source_message_id: int | None
    received_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


def _album_id() -> str:
    return uuid4().hex[:8]


@dataclass
class Album:
    """A batch of media items delivered together as one media group."""

    items: tuple[MediaItem, ...]
    caption: str | None = None
    sent_message_id: int | None = None
    id: str = field(default_factory=_album_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __len__(self) -> int:
        return len(self.items)

    @property
    def source_message_ids(self) -> list[int]:
        """Ids of the inbound messages the items came from."""
        return [
            item.source_message_id
            for item in self.items
            if item.source_message_id is not None
        ]
