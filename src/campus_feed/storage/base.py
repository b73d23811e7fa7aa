"""Abstract durable key/value storage used by the store."""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["StorageGateway"]


class StorageGateway(ABC):
    """String-keyed, string-valued durable storage.

    Every method is a coroutine and may fail independently by raising
    :class:`campus_feed.core.errors.PersistenceError`.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""

    async def close(self) -> None:
        """Release any resources held by the gateway."""
        return None
