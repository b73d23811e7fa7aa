"""Process-local storage gateway."""

from __future__ import annotations

from campus_feed.core.errors import PersistenceError

from .base import StorageGateway

__all__ = ["InMemoryStorage"]


class InMemoryStorage(StorageGateway):
    """Dict-backed gateway for tests and throwaway sessions.

    ``fail_reads`` / ``fail_writes`` make the gateway behave like a failing
    device so callers' error handling can be exercised.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise PersistenceError(f"Read of {key!r} failed")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Write of {key!r} failed")
        self.data[key] = value

    async def remove(self, key: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Removal of {key!r} failed")
        self.data.pop(key, None)
