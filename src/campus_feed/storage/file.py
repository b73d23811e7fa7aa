"""Storage gateway backed by a single JSON document on disk."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from campus_feed.core.errors import PersistenceError

from .base import StorageGateway

__all__ = ["JsonFileStorage"]

logger = logging.getLogger(__name__)


class JsonFileStorage(StorageGateway):
    """Keeps every key in one JSON object file.

    File access runs in a worker thread. Operations are serialized with an
    asyncio lock so concurrent writes from one loop apply in submission order,
    and each write replaces the file atomically.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = value
            await asyncio.to_thread(self._write, data)

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if data.pop(key, None) is not None:
                await asyncio.to_thread(self._write, data)

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise PersistenceError(f"Failed to read {self.path}: {exc}") from exc

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt storage file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Failed to write {self.path}: {exc}") from exc
        logger.debug("Wrote %d keys to %s", len(data), self.path)
