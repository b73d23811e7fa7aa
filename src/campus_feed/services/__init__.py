"""Business logic services for the campus feed store."""

from .auth import AuthService
from .bootstrap import open_store, restore
from .ordering import order_by_recency
from .store import EntityStore
from .validation import is_valid_comment, is_valid_post, is_valid_user

__all__ = [
    "AuthService",
    "EntityStore",
    "open_store",
    "order_by_recency",
    "restore",
    "is_valid_comment",
    "is_valid_post",
    "is_valid_user",
]
