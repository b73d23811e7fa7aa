"""Startup restoration and lifecycle of an entity store."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from campus_feed.core.errors import PersistenceError
from campus_feed.core.settings import Settings
from campus_feed.core.settings import settings as default_settings
from campus_feed.schemas.post import Post
from campus_feed.schemas.user import User
from campus_feed.services.store import EntityStore
from campus_feed.services.validation import is_valid_post, is_valid_user
from campus_feed.storage import get_storage
from campus_feed.storage.base import StorageGateway

__all__ = ["decode_posts", "decode_user", "open_store", "restore"]

logger = logging.getLogger(__name__)


async def _read(storage: StorageGateway, key: str) -> str | None:
    try:
        return await storage.get(key)
    except PersistenceError as exc:
        logger.error("Error loading %r from storage: %s", key, exc)
        return None


def _load_json(raw: str, key: str) -> object | None:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Stored %r data is not valid JSON: %s", key, exc)
        return None


def decode_user(raw: str | None, key: str = "user") -> User | None:
    """Return the stored user, or None when absent or invalid."""
    if raw is None:
        return None
    data = _load_json(raw, key)
    if data is None:
        return None
    if not is_valid_user(data):
        logger.error("Stored user data is invalid")
        return None
    return User.model_validate(data)


def decode_posts(raw: str | None, key: str = "posts") -> list[Post]:
    """Return the stored posts, dropping any that fail validation.

    Timestamp strings are parsed back into aware datetimes by the model.
    """
    if raw is None:
        return []
    data = _load_json(raw, key)
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error("Stored posts data is not a list")
        return []

    posts: list[Post] = []
    for item in data:
        if is_valid_post(item):
            posts.append(Post.model_validate(item))
        else:
            logger.error("Discarding invalid stored post")
    return posts


async def restore(
    store: EntityStore,
    storage: StorageGateway | None = None,
    config: Settings | None = None,
) -> EntityStore:
    """Load the persisted user and posts into ``store``.

    A failed read or an invalid record leaves that part of the store empty.
    """
    config = config or store.settings
    storage = storage or store.storage
    user = decode_user(await _read(storage, config.user_key), config.user_key)
    posts = decode_posts(await _read(storage, config.posts_key), config.posts_key)
    store.load(user=user, posts=posts)
    logger.debug(
        "Restored %d posts (user %s)", len(posts), user.username if user else "absent"
    )
    return store


@asynccontextmanager
async def open_store(
    config: Settings | None = None,
    storage: StorageGateway | None = None,
) -> AsyncIterator[EntityStore]:
    """Build, restore and eventually close an entity store.

    Pending writes are flushed and the gateway closed when the block exits.
    """
    config = config or default_settings
    storage = storage or get_storage(config)
    store = EntityStore(storage, config=config)
    await restore(store, config=config)
    try:
        yield store
    finally:
        await store.close()
