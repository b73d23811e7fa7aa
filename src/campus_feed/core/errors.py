"""Error taxonomy for the campus feed store.

Expected conditions (validation, not found, conflict, auth) are never raised
across the store boundary. They travel inside a ``StoreResult`` instead.
``PersistenceError`` is the only one raised by the storage gateways.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for every failure the store can report."""

    code = "store_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    """A record or an argument failed its shape check."""

    code = "validation_error"


class NotFoundError(StoreError):
    """A post, comment or user referenced by an operation does not exist."""

    code = "not_found"


class ConflictError(StoreError):
    """Duplicate signup or a like/unlike applied twice."""

    code = "conflict"


class AuthError(StoreError):
    """Login credentials did not match any registered user."""

    code = "auth_error"


class PersistenceError(StoreError):
    """The durable storage gateway failed a read or a write."""

    code = "persistence_error"
