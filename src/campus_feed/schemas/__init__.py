# src/campus_feed/schemas/__init__.py
"""
Pydantic records held by the store.

These schemas define the structure of stored data for serialization and validation.
"""

from .post import Comment, Post
from .result import StoreResult
from .reward import Reward
from .user import LoginRequest, SignupRequest, User

__all__ = [
    "Comment", "Post",
    "Reward",
    "StoreResult",
    "LoginRequest", "SignupRequest", "User",
]
