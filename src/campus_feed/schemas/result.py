"""Explicit result signal returned by store and auth operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from campus_feed.core.errors import StoreError


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a store operation.

    Exactly one of ``value`` (on success, optional) or ``error`` (on failure,
    mandatory) is meaningful.
    """

    ok: bool
    error: StoreError | None = None
    value: Any = None

    def __post_init__(self) -> None:
        if not self.ok and self.error is None:
            raise ValueError("A failed StoreResult must carry an error.")
        if self.ok and self.error is not None:
            raise ValueError("A successful StoreResult must not carry an error.")

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> StoreResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: StoreError) -> StoreResult:
        return cls(ok=False, error=error)

    def raise_for_error(self) -> Any:
        """Raise the carried error, or return ``value`` on success."""
        if self.error is not None:
            raise self.error
        return self.value
