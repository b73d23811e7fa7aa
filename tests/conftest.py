# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest

from campus_feed.core.settings import Settings
from campus_feed.schemas.post import Comment, Post
from campus_feed.schemas.user import User
from campus_feed.services.auth import AuthService
from campus_feed.services.store import EntityStore
from campus_feed.storage.memory import InMemoryStorage

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

_POST_COUNTER = count(1)
_COMMENT_COUNTER = count(1)


@pytest.fixture()
def test_settings() -> Settings:
    """Settings pinned to the in-memory backend and default keys."""
    return Settings(
        storage_backend="memory",
        user_key="user",
        posts_key="posts",
        users_key="users",
        min_username_length=3,
        min_password_length=6,
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def store(storage: InMemoryStorage, test_settings: Settings) -> EntityStore:
    return EntityStore(storage, config=test_settings)


@pytest.fixture()
def auth(store: EntityStore, storage: InMemoryStorage, test_settings: Settings) -> AuthService:
    return AuthService(store, storage, test_settings)


@pytest.fixture()
def make_post() -> Callable[..., Post]:
    def _make_post(**overrides: Any) -> Post:
        index = next(_POST_COUNTER)
        fields: dict[str, Any] = {
            "id": f"post-{index}",
            "organization": "Chess Club",
            "author": "alice",
            "heading": f"Heading {index}",
            "body": "Body text",
            "is_event": False,
            "created_at": BASE_TIME + timedelta(minutes=index),
            "likes": 0,
            "comments": [],
        }
        fields.update(overrides)
        return Post(**fields)

    return _make_post


@pytest.fixture()
def make_comment() -> Callable[..., Comment]:
    def _make_comment(**overrides: Any) -> Comment:
        index = next(_COMMENT_COUNTER)
        fields: dict[str, Any] = {
            "id": f"comment-{index}",
            "author": "bob",
            "content": f"Comment {index}",
            "created_at": BASE_TIME,
        }
        fields.update(overrides)
        return Comment(**fields)

    return _make_comment


@pytest.fixture()
def alice() -> User:
    return User(username="alice", email="alice@example.com", password="secret1")


@pytest.fixture()
def signed_in_store(store: EntityStore, alice: User) -> EntityStore:
    store.load(user=alice)
    return store
