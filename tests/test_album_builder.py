"""Tests for partitioning pending media into albums."""

import math

import pytest

from album_maker.domain.albums import partition
from tests.conftest import make_item


def _items(count: int):
    return [make_item(number) for number in range(1, count + 1)]


def test_partition_single_item_produces_no_chunks() -> None:
    plan = partition(_items(1))

    assert plan.chunks == ()
    assert plan.insufficient
    assert plan.dropped == ()


def test_partition_empty_batch() -> None:
    plan = partition([])

    assert plan.chunks == ()
    assert plan.insufficient


def test_partition_eleven_items_drops_trailing_item() -> None:
    items = _items(11)

    plan = partition(items, 10)

    assert len(plan.chunks) == 1
    assert list(plan.chunks[0]) == items[:10]
    assert plan.dropped == (items[10],)
    assert not plan.insufficient


def test_partition_twenty_one_items_keeps_full_chunks() -> None:
    items = _items(21)

    plan = partition(items, 10)

    assert [len(chunk) for chunk in plan.chunks] == [10, 10]
    assert plan.dropped == (items[20],)


def test_partition_splits_into_ordered_chunks() -> None:
    items = _items(25)

    plan = partition(items, 10)

    assert [len(chunk) for chunk in plan.chunks] == [10, 10, 5]
    assert list(plan.dispatched_items) == items


def test_partition_two_item_remainder_is_kept() -> None:
    plan = partition(_items(12), 10)

    assert [len(chunk) for chunk in plan.chunks] == [10, 2]
    assert plan.dropped == ()


@pytest.mark.parametrize("count", range(2, 46))
def test_partition_chunk_sizes_and_count(count: int) -> None:
    items = _items(count)

    plan = partition(items, 10)

    expected = math.ceil(count / 10) if count % 10 != 1 else count // 10
    assert len(plan.chunks) == expected
    assert all(2 <= len(chunk) <= 10 for chunk in plan.chunks)
    assert list(plan.dispatched_items) + list(plan.dropped) == items


def test_partition_is_deterministic() -> None:
    items = _items(23)

    assert partition(items, 4) == partition(items, 4)


def test_partition_respects_custom_limit() -> None:
    plan = partition(_items(7), 3)

    assert [len(chunk) for chunk in plan.chunks] == [3, 3]
    assert len(plan.dropped) == 1


def test_partition_rejects_limit_below_two() -> None:
    with pytest.raises(ValueError):
        partition(_items(3), 1)
