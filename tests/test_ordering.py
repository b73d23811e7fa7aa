"""Tests for feed ordering."""

from datetime import UTC, datetime, timedelta

from campus_feed.services.ordering import order_by_recency

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def test_orders_newest_first(make_post) -> None:
    old = make_post(created_at=BASE_TIME)
    new = make_post(created_at=BASE_TIME + timedelta(days=1))
    middle = make_post(created_at=BASE_TIME + timedelta(hours=1))

    assert [p.id for p in order_by_recency([old, new, middle])] == [new.id, middle.id, old.id]


def test_does_not_mutate_input(make_post) -> None:
    posts = [make_post(created_at=BASE_TIME), make_post(created_at=BASE_TIME + timedelta(days=1))]
    original = list(posts)
    ordered = order_by_recency(posts)
    assert posts == original
    assert ordered is not posts


def test_ties_keep_input_order(make_post) -> None:
    tied = [make_post(created_at=BASE_TIME) for _ in range(4)]
    newest = make_post(created_at=BASE_TIME + timedelta(seconds=1))
    ordered = order_by_recency([*tied[:2], newest, *tied[2:]])
    assert [p.id for p in ordered] == [newest.id] + [p.id for p in tied]


def test_idempotent(make_post) -> None:
    posts = [
        make_post(created_at=BASE_TIME + timedelta(minutes=offset))
        for offset in (5, 1, 5, 3, 0, 3)
    ]
    once = order_by_recency(posts)
    assert order_by_recency(once) == once


def test_empty() -> None:
    assert order_by_recency([]) == []
