"""Durable key/value storage gateways."""

from __future__ import annotations

from campus_feed.core.settings import Settings
from campus_feed.core.settings import settings as default_settings

from .base import StorageGateway
from .file import JsonFileStorage
from .memory import InMemoryStorage
from .redis_backend import RedisStorage

__all__ = [
    "StorageGateway",
    "InMemoryStorage",
    "JsonFileStorage",
    "RedisStorage",
    "get_storage",
]


def get_storage(config: Settings | None = None) -> StorageGateway:
    """Return the storage gateway selected by ``storage_backend``."""
    config = config or default_settings
    if config.storage_backend == "memory":
        return InMemoryStorage()
    if config.storage_backend == "redis":
        return RedisStorage(config.redis_url, namespace=config.redis_namespace)
    return JsonFileStorage(config.storage_path)
