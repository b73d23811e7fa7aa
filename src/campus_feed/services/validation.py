"""Shape predicates deciding whether a record may enter the store.

Every predicate is total: it accepts a model instance, a raw mapping (for
example a decoded storage payload) or anything else, and answers with a bool
without raising.

Raw mappings are checked before pydantic sees them, so a missing counter or a
value pydantic would coerce (``"5"``, ``True``) is rejected instead of being
defaulted or converted.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from campus_feed.schemas.post import Comment, Post
from campus_feed.schemas.user import User

__all__ = ["is_valid_user", "is_valid_post", "is_valid_comment"]

_ModelT = TypeVar("_ModelT", bound=BaseModel)
_MISSING = object()


def _raw(record: Mapping[str, Any], alias: str, name: str) -> Any:
    """Look a field up by its storage alias, then by its attribute name."""
    if alias in record:
        return record[alias]
    return record.get(name, _MISSING)


def _as_record(model: type[_ModelT], record: Any) -> _ModelT | None:
    if isinstance(record, model):
        return record
    if isinstance(record, Mapping):
        try:
            return model.model_validate(record)
        except PydanticValidationError:
            return None
    return None


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and value >= 0


def _fields(record: BaseModel, *names: str) -> list[Any]:
    # Partially constructed models may lack attributes.
    return [getattr(record, name, None) for name in names]


def is_valid_user(record: Any) -> bool:
    """Return True if ``record`` is a well-formed user.

    Username, email and password must be non-empty strings and the reward
    balance a finite, non-negative number.
    """
    if isinstance(record, Mapping) and not _non_negative_number(
        _raw(record, "rewardPoints", "reward_points")
    ):
        return False
    user = _as_record(User, record)
    if user is None:
        return False
    username, email, password, points = _fields(
        user, "username", "email", "password", "reward_points"
    )
    return (
        _non_empty_str(username)
        and _non_empty_str(email)
        and _non_empty_str(password)
        and _non_negative_number(points)
    )


def is_valid_post(record: Any) -> bool:
    """Return True if ``record`` is a well-formed post.

    Identity and text fields must be non-empty strings, ``created_at`` a
    timestamp, ``likes`` a non-negative number and ``comments`` a list. An
    event post must carry an event date.
    """
    if isinstance(record, Mapping) and not (
        _non_negative_number(_raw(record, "likes", "likes"))
        and isinstance(_raw(record, "comments", "comments"), list)
    ):
        return False
    post = _as_record(Post, record)
    if post is None:
        return False
    texts = _fields(post, "id", "organization", "author", "heading", "body")
    created_at, likes, comments, is_event, event_date = _fields(
        post, "created_at", "likes", "comments", "is_event", "event_date"
    )
    return (
        all(_non_empty_str(text) for text in texts)
        and isinstance(created_at, datetime)
        and _non_negative_number(likes)
        and isinstance(comments, list)
        and (not is_event or isinstance(event_date, datetime))
    )


def is_valid_comment(record: Any) -> bool:
    """Return True if ``record`` is a well-formed comment."""
    comment = _as_record(Comment, record)
    if comment is None:
        return False
    comment_id, author, content, created_at = _fields(
        comment, "id", "author", "content", "created_at"
    )
    return (
        _non_empty_str(comment_id)
        and _non_empty_str(author)
        and _non_empty_str(content)
        and isinstance(created_at, datetime)
    )
