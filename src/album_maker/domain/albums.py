"""Partitioning of pending media into album-sized chunks."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from album_maker.domain.media import MediaItem

logger = logging.getLogger(__name__)

MIN_MEDIA_PER_ALBUM = 2
MAX_MEDIA_PER_ALBUM = 10


@dataclass(frozen=True)
class AlbumPlan:
    """Result of partitioning a batch of pending items."""

    chunks: tuple[tuple[MediaItem, ...], ...]
    dropped: tuple[MediaItem, ...] = field(default=())
    total: int = 0

    @property
    def insufficient(self) -> bool:
        """True when the batch is too small to produce any album."""
        return self.total < MIN_MEDIA_PER_ALBUM

    @property
    def dispatched_items(self) -> tuple[MediaItem, ...]:
        return tuple(item for chunk in self.chunks for item in chunk)


def partition(
    items: Sequence[MediaItem], max_per_album: int = MAX_MEDIA_PER_ALBUM
) -> AlbumPlan:
    """Split items into consecutive chunks of at most ``max_per_album``.

    Arrival order is preserved. A batch with fewer than two items yields no
    chunks. A trailing chunk with fewer than two items cannot be sent as a
    media group, so it is dropped while the preceding chunks proceed.
    """
    if max_per_album < MIN_MEDIA_PER_ALBUM:
        raise ValueError(f"max_per_album must be >= {MIN_MEDIA_PER_ALBUM}")
    total = len(items)
    if total < MIN_MEDIA_PER_ALBUM:
        return AlbumPlan(chunks=(), total=total)

    chunks = [
        tuple(items[start : start + max_per_album])
        for start in range(0, total, max_per_album)
    ]
    dropped: tuple[MediaItem, ...] = ()
    if len(chunks[-1]) < MIN_MEDIA_PER_ALBUM:
        dropped = chunks.pop()
        logger.warning(
            "Dropping %d trailing item(s) too few for an album (batch of %d)",
            len(dropped),
            total,
        )
    return AlbumPlan(chunks=tuple(chunks), dropped=dropped, total=total)
