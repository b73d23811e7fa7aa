"""In-memory entity store for users, posts, comments and rewards.

The store is the single authoritative owner of the resident user, the post
collection and the reward catalog. It exposes synchronous mutation methods
that:

1. validate their inputs,
2. apply the change to in-memory state (immediately visible to readers),
3. enqueue a persistence effect carrying a JSON snapshot of the touched
   aggregate.

Persistence is best effort. With a running event loop an effect is dispatched
right away as a background task; otherwise it waits until :meth:`flush`.
A failed write is logged and never rolls back in-memory state, so the newest
snapshot written wins.

Expected failures (validation, not found, conflict) are reported through
:class:`~campus_feed.schemas.result.StoreResult` rather than raised.
"""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel

from campus_feed.core.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    StoreError,
    ValidationError,
)
from campus_feed.core.settings import Settings
from campus_feed.core.settings import settings as default_settings
from campus_feed.schemas.post import Comment, Post
from campus_feed.schemas.result import StoreResult
from campus_feed.schemas.reward import Reward
from campus_feed.schemas.user import User
from campus_feed.services.rewards import DEFAULT_REWARDS
from campus_feed.services.validation import (
    is_valid_comment,
    is_valid_post,
    is_valid_user,
)
from campus_feed.storage.base import StorageGateway

__all__ = ["EntityStore", "PersistenceEffect"]

logger = logging.getLogger(__name__)

Listener = Callable[["EntityStore"], None]
_ModelT = TypeVar("_ModelT", bound=BaseModel)


@dataclass(frozen=True)
class PersistenceEffect:
    """A pending write of one storage key.

    ``value`` of None means the key is removed.
    """

    key: str
    value: str | None


def _copy_record(model: type[_ModelT], record: Any) -> _ModelT:
    """Return a private deep copy of ``record`` as ``model``."""
    if isinstance(record, model):
        return record.model_copy(deep=True)
    return model.model_validate(record)


def _valid_id(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class EntityStore:
    """Authoritative in-memory state plus its mutation API.

    Each instance is independent, so tests can build as many as they need.
    Readers receive deep copies and can never mutate store state directly.
    """

    def __init__(
        self,
        storage: StorageGateway,
        *,
        rewards: Iterable[Reward] | None = None,
        config: Settings | None = None,
    ) -> None:
        self._storage = storage
        self._settings = config or default_settings
        self._user: User | None = None
        self._posts: list[Post] = []
        self._rewards: tuple[Reward, ...] = tuple(
            rewards if rewards is not None else DEFAULT_REWARDS
        )
        self._deferred: list[PersistenceEffect] = []
        self._in_flight: set[asyncio.Task[None]] = set()
        self._tails: dict[str, asyncio.Task[None]] = {}
        self._listeners: list[Listener] = []

    # --- Snapshots --------------------------------------------------------------

    @property
    def storage(self) -> StorageGateway:
        return self._storage

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def current_user(self) -> User | None:
        """Return a copy of the resident user, or None when signed out."""
        if self._user is None:
            return None
        return self._user.model_copy(deep=True)

    @property
    def posts(self) -> tuple[Post, ...]:
        """Return copies of all posts in storage order (newest insert first)."""
        return tuple(post.model_copy(deep=True) for post in self._posts)

    @property
    def rewards(self) -> tuple[Reward, ...]:
        return tuple(reward.model_copy() for reward in self._rewards)

    @property
    def pending(self) -> int:
        """Number of persistence effects not yet completed."""
        return len(self._deferred) + len(self._in_flight)

    def get_post(self, post_id: str) -> Post | None:
        """Return a copy of the post with ``post_id`` or None."""
        post = self._find_post(post_id)
        return post.model_copy(deep=True) if post is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every successful mutation.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Posts ------------------------------------------------------------------

    def add_post(self, post: Post | Mapping[str, Any]) -> StoreResult:
        """Insert ``post`` at the front of the collection."""
        if not is_valid_post(post):
            return self._reject(ValidationError("Invalid post data"))
        record = _copy_record(Post, post)
        if self._find_post(record.id) is not None:
            return self._reject(ConflictError(f"Post {record.id} already exists"))

        self._posts.insert(0, record)
        self._commit_posts()
        return StoreResult.success(record.model_copy(deep=True))

    def update_post(self, post: Post | Mapping[str, Any]) -> StoreResult:
        """Replace the stored post sharing ``post.id``; other posts are untouched."""
        if not is_valid_post(post):
            return self._reject(ValidationError("Invalid post data"))
        record = _copy_record(Post, post)
        index = self._post_index(record.id)
        if index is None:
            return self._reject(NotFoundError(f"Post not found for update with id: {record.id}"))

        self._posts[index] = record
        self._commit_posts()
        return StoreResult.success(record.model_copy(deep=True))

    def delete_post(self, post_id: str) -> StoreResult:
        """Remove the post with ``post_id``. Removing an absent post succeeds."""
        if not _valid_id(post_id):
            return self._reject(ValidationError(f"Invalid post id: {post_id!r}"))

        self._posts = [post for post in self._posts if post.id != post_id]
        self._commit_posts()
        return StoreResult.success()

    # --- Likes ------------------------------------------------------------------

    def like_post(self, post_id: str) -> StoreResult:
        """Like a post on behalf of the resident user.

        Increments the post's likes and the user's reward points by one and
        records the post in ``liked_posts``. A user earns at most one point
        per post.

        Both aggregates change before this method returns and nothing in
        between yields to the event loop, which is what makes the change
        atomic. A multi-threaded caller would need a lock around it.
        """
        if not _valid_id(post_id):
            return self._reject(ValidationError(f"Invalid post id: {post_id!r}"))
        if self._user is None:
            return self._reject(NotFoundError("No user is signed in"))
        if self._user.has_liked(post_id):
            return self._reject(ConflictError(f"User has already liked this post: {post_id}"))
        post = self._find_post(post_id)
        if post is None:
            return self._reject(NotFoundError(f"Post not found for liking with id: {post_id}"))

        updated_user = self._user.model_copy(
            update={
                "reward_points": self._user.reward_points + 1,
                "liked_posts": [*self._user.liked_posts, post_id],
            },
            deep=True,
        )
        if not is_valid_user(updated_user):
            return self._reject(ValidationError("Updated user data is invalid"))

        post.likes += 1
        self._user = updated_user
        self._commit_posts(notify=False)
        self._commit_user()
        return StoreResult.success(post.model_copy(deep=True))

    def unlike_post(self, post_id: str) -> StoreResult:
        """Undo a like: the exact inverse of :meth:`like_post`.

        Likes and reward points are floored at zero.
        """
        if not _valid_id(post_id):
            return self._reject(ValidationError(f"Invalid post id: {post_id!r}"))
        if self._user is None:
            return self._reject(NotFoundError("No user is signed in"))
        if not self._user.has_liked(post_id):
            return self._reject(ConflictError(f"User has not liked this post: {post_id}"))
        post = self._find_post(post_id)
        if post is None:
            return self._reject(NotFoundError(f"Post not found for unliking with id: {post_id}"))

        post.likes = max(post.likes - 1, 0)
        self._user = self._user.model_copy(
            update={
                "reward_points": max(self._user.reward_points - 1, 0),
                "liked_posts": [pid for pid in self._user.liked_posts if pid != post_id],
            },
            deep=True,
        )
        self._commit_posts(notify=False)
        self._commit_user()
        return StoreResult.success(post.model_copy(deep=True))

    # --- Comments ---------------------------------------------------------------

    def add_comment(self, post_id: str, comment: Comment | Mapping[str, Any]) -> StoreResult:
        """Append ``comment`` to the post's comments."""
        if not _valid_id(post_id):
            return self._reject(ValidationError(f"Invalid post id: {post_id!r}"))
        if not is_valid_comment(comment):
            return self._reject(ValidationError("Invalid comment data"))
        post = self._find_post(post_id)
        if post is None:
            return self._reject(
                NotFoundError(f"Post not found for adding comment with id: {post_id}")
            )
        record = _copy_record(Comment, comment)
        if post.find_comment(record.id) is not None:
            return self._reject(ConflictError(f"Comment {record.id} already exists"))

        post.comments.append(record)
        self._commit_posts()
        return StoreResult.success(record.model_copy(deep=True))

    def update_comment(self, post_id: str, comment: Comment | Mapping[str, Any]) -> StoreResult:
        """Replace the comment sharing ``comment.id`` inside the given post."""
        if not _valid_id(post_id):
            return self._reject(ValidationError(f"Invalid post id: {post_id!r}"))
        if not is_valid_comment(comment):
            return self._reject(ValidationError("Invalid comment data"))
        record = _copy_record(Comment, comment)
        post = self._find_post(post_id)
        if post is None or post.find_comment(record.id) is None:
            return self._reject(
                NotFoundError(
                    f"Comment not found for update in post with id: {post_id}, "
                    f"comment id: {record.id}"
                )
            )

        post.comments = [record if c.id == record.id else c for c in post.comments]
        self._commit_posts()
        return StoreResult.success(record.model_copy(deep=True))

    def delete_comment(self, post_id: str, comment_id: str) -> StoreResult:
        """Remove a comment. Removing an absent comment succeeds."""
        if not _valid_id(post_id) or not _valid_id(comment_id):
            return self._reject(
                ValidationError(f"Invalid post id or comment id: {post_id!r}, {comment_id!r}")
            )

        post = self._find_post(post_id)
        if post is not None:
            post.comments = [c for c in post.comments if c.id != comment_id]
        self._commit_posts()
        return StoreResult.success()

    # --- User -------------------------------------------------------------------

    def update_user(self, user: User | Mapping[str, Any]) -> StoreResult:
        """Replace the resident user wholesale.

        Fields are not merged: callers must carry over ``liked_posts`` and
        ``reward_points`` themselves.
        """
        if not is_valid_user(user):
            return self._reject(ValidationError("Invalid user data"))

        self._user = _copy_record(User, user)
        self._commit_user()
        return StoreResult.success(self._user.model_copy(deep=True))

    def set_user(self, user: User | None) -> StoreResult:
        """Install ``user`` as the resident user without validation.

        Passing None signs the user out and removes the persisted record.
        """
        self._user = user.model_copy(deep=True) if user is not None else None
        self._commit_user()
        return StoreResult.success(self.current_user)

    # --- Loading ----------------------------------------------------------------

    def load(self, *, user: User | None = None, posts: Iterable[Post] = ()) -> None:
        """Install restored state without scheduling any writes."""
        self._user = user.model_copy(deep=True) if user is not None else None
        self._posts = [post.model_copy(deep=True) for post in posts]
        self._notify()

    def clear(self) -> None:
        """Drop all resident state without touching storage."""
        self._user = None
        self._posts = []
        self._notify()

    # --- Persistence ------------------------------------------------------------

    async def flush(self) -> None:
        """Dispatch deferred effects and wait for every write in flight.

        ``PersistenceError`` is logged by the writer; anything else raised by
        the gateway propagates from here.
        """
        self._dispatch_deferred()
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight))

    async def close(self) -> None:
        """Flush pending writes and release the storage gateway."""
        await self.flush()
        await self._storage.close()

    def _commit_posts(self, *, notify: bool = True) -> None:
        payload = json.dumps([post.to_storage() for post in self._posts])
        self._enqueue(PersistenceEffect(self._settings.posts_key, payload))
        if notify:
            self._notify()

    def _commit_user(self) -> None:
        payload = json.dumps(self._user.to_storage()) if self._user is not None else None
        self._enqueue(PersistenceEffect(self._settings.user_key, payload))
        self._notify()

    def _enqueue(self, effect: PersistenceEffect) -> None:
        self._deferred.append(effect)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._dispatch_deferred()

    def _dispatch_deferred(self) -> None:
        effects, self._deferred = self._deferred, []
        for effect in effects:
            # Writes to one key are chained so they land in submission order
            # whatever the gateway does with concurrent calls.
            previous = self._tails.get(effect.key)
            task = asyncio.create_task(self._write(effect, previous))
            self._in_flight.add(task)
            self._tails[effect.key] = task
            task.add_done_callback(functools.partial(self._finished, effect.key))

    def _finished(self, key: str, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if self._tails.get(key) is task:
            del self._tails[key]

    async def _write(
        self, effect: PersistenceEffect, previous: asyncio.Task[None] | None = None
    ) -> None:
        if previous is not None:
            # Only the ordering matters here; the earlier task reports its own error.
            await asyncio.wait({previous})
        try:
            if effect.value is None:
                await self._storage.remove(effect.key)
            else:
                await self._storage.set(effect.key, effect.value)
        except PersistenceError as exc:
            logger.warning("Failed to persist %r: %s", effect.key, exc)

    # --- Helpers ----------------------------------------------------------------

    def _find_post(self, post_id: str) -> Post | None:
        index = self._post_index(post_id)
        return self._posts[index] if index is not None else None

    def _post_index(self, post_id: str) -> int | None:
        for index, post in enumerate(self._posts):
            if post.id == post_id:
                return index
        return None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    @staticmethod
    def _reject(error: StoreError) -> StoreResult:
        logger.warning("%s: %s", type(error).__name__, error.message)
        return StoreResult.failure(error)
