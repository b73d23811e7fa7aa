"""Tests for startup restoration and the store lifecycle."""

import json
import logging
from datetime import datetime

import pytest

from campus_feed.core.settings import Settings
from campus_feed.services.bootstrap import decode_posts, decode_user, open_store, restore
from campus_feed.services.store import EntityStore
from campus_feed.storage.memory import InMemoryStorage


@pytest.mark.asyncio
async def test_restore_round_trip(store: EntityStore, storage, alice, make_post, make_comment,
                                  test_settings) -> None:
    post = make_post()
    store.set_user(alice)
    store.add_post(post)
    store.add_comment(post.id, make_comment())
    await store.flush()

    fresh = EntityStore(storage, config=test_settings)
    await restore(fresh)

    assert fresh.current_user == alice
    assert fresh.posts == store.posts
    restored = fresh.posts[0]
    assert isinstance(restored.created_at, datetime)
    assert isinstance(restored.comments[0].created_at, datetime)


@pytest.mark.asyncio
async def test_restore_event_date(store: EntityStore, storage, make_post, test_settings) -> None:
    post = make_post(is_event=True, event_date=datetime(2024, 5, 1, 18, 30))
    store.add_post(post)
    await store.flush()

    fresh = await restore(EntityStore(storage, config=test_settings))

    assert fresh.posts[0].event_date == post.event_date
    assert fresh.posts[0].event_date.tzinfo is not None


@pytest.mark.asyncio
async def test_restore_discards_invalid_user(caplog, test_settings) -> None:
    storage = InMemoryStorage(
        {"user": json.dumps({"username": "alice", "email": "", "password": "secret1"})}
    )
    store = EntityStore(storage, config=test_settings)
    with caplog.at_level(logging.ERROR):
        await restore(store)
    assert store.current_user is None
    assert "Stored user data is invalid" in caplog.text


@pytest.mark.asyncio
async def test_restore_treats_read_failure_as_absent(test_settings) -> None:
    storage = InMemoryStorage({"user": "{}", "posts": "[]"})
    storage.fail_reads = True
    store = await restore(EntityStore(storage, config=test_settings))
    assert store.current_user is None
    assert store.posts == ()


@pytest.mark.asyncio
async def test_restore_does_not_schedule_writes(store: EntityStore) -> None:
    await restore(store)
    assert store.pending == 0


def test_decode_posts_keeps_valid_entries(make_post) -> None:
    good = make_post()
    raw = json.dumps([good.to_storage(), {**good.to_storage(), "id": "bad", "likes": -3}])
    assert decode_posts(raw) == [good]


@pytest.mark.parametrize("raw", [None, "", "not json", json.dumps({"id": "p"})])
def test_decode_posts_tolerates_garbage(raw) -> None:
    assert decode_posts(raw) == []


@pytest.mark.parametrize("raw", [None, "[]", "oops", json.dumps({"username": "al"})])
def test_decode_user_tolerates_garbage(raw) -> None:
    assert decode_user(raw) is None


@pytest.mark.asyncio
async def test_open_store_flushes_on_exit(alice, make_post) -> None:
    config = Settings(storage_backend="memory")
    storage = InMemoryStorage()

    async with open_store(config, storage) as store:
        store.set_user(alice)
        store.add_post(make_post())

    assert json.loads(storage.data["user"])["username"] == "alice"
    assert len(json.loads(storage.data["posts"])) == 1

    async with open_store(config, storage) as reopened:
        assert reopened.current_user == alice
        assert len(reopened.posts) == 1


def test_decode_user_requires_reward_points() -> None:
    raw = json.dumps({"username": "alice", "email": "alice@example.com", "password": "secret1"})
    assert decode_user(raw) is None


def test_decode_posts_drops_counterless_and_dateless_event_posts(make_post) -> None:
    good = make_post()
    no_likes = {k: v for k, v in make_post().to_storage().items() if k != "likes"}
    dateless_event = {**make_post().to_storage(), "isEvent": True}
    raw = json.dumps([good.to_storage(), no_likes, dateless_event])
    assert decode_posts(raw) == [good]
