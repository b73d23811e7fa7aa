"""Presentation ordering for the post feed."""

from __future__ import annotations

from collections.abc import Iterable

from campus_feed.schemas.post import Post

__all__ = ["order_by_recency"]


def order_by_recency(posts: Iterable[Post]) -> list[Post]:
    """Return a new list of posts, most recently created first.

    The input is not modified. ``sorted`` is stable, also with
    ``reverse=True``, so posts sharing a timestamp keep their relative order.
    """
    return sorted(posts, key=lambda post: post.created_at, reverse=True)
