"""Read-side helpers for the event calendar."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date

from campus_feed.core.time import utcnow
from campus_feed.schemas.post import Post

ONGOING_LABEL = "Ongoing Events"
UPCOMING_LABEL = "Upcoming Events"
PAST_LABEL = "Past Events"


def event_day(post: Post) -> date | None:
    """Return the UTC calendar day of an event post."""
    if not post.is_event or post.event_date is None:
        return None
    return post.event_date.astimezone(UTC).date()


def event_posts(posts: Iterable[Post]) -> list[Post]:
    """Return the posts that are events with a date."""
    return [post for post in posts if event_day(post) is not None]


def events_on(posts: Iterable[Post], day: date) -> list[Post]:
    """Return the event posts taking place on ``day``."""
    return [post for post in posts if event_day(post) == day]


def marked_dates(posts: Iterable[Post]) -> set[date]:
    """Return every day that has at least one event."""
    return {day for day in map(event_day, posts) if day is not None}


def event_label(day: date, today: date | None = None) -> str:
    """Describe events on ``day`` relative to ``today``."""
    today = today or utcnow().date()
    if day == today:
        return ONGOING_LABEL
    if day > today:
        return UPCOMING_LABEL
    return PAST_LABEL
