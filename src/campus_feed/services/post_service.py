"""Service-level helpers for building new posts and comments."""
from __future__ import annotations

import uuid
from datetime import datetime

from campus_feed.core.errors import ValidationError
from campus_feed.core.time import utcnow
from campus_feed.schemas.post import Comment, Post
from campus_feed.schemas.user import User

ANONYMOUS_AUTHOR = "Anonymous"
GUEST_AUTHOR = "Guest"


def new_id() -> str:
    """Return a fresh globally unique record identifier."""
    return str(uuid.uuid4())


def build_post(
    *,
    author: User | None,
    organization: str,
    heading: str,
    body: str,
    is_event: bool = False,
    event_date: datetime | None = None,
) -> Post:
    """Create a post record ready for ``EntityStore.add_post``.

    Args:
        author: Signed-in user, or None to post anonymously.
        organization: Organization the post is published for.
        heading: Post title.
        body: Post text.
        is_event: Whether the post announces a calendar event.
        event_date: When the event happens. Required for events, ignored otherwise.

    Raises:
        ValidationError: If heading or body is blank, or an event has no date.
    """
    if not heading.strip() or not body.strip():
        raise ValidationError("Please fill in heading and body.")
    if is_event and event_date is None:
        raise ValidationError("An event post needs an event date.")

    return Post(
        id=new_id(),
        organization=organization,
        author=author.username if author is not None else ANONYMOUS_AUTHOR,
        heading=heading,
        body=body,
        is_event=is_event,
        event_date=event_date if is_event else None,
        created_at=utcnow(),
        likes=0,
        comments=[],
    )


def build_comment(*, author: User | None, content: str) -> Comment:
    """Create a comment record ready for ``EntityStore.add_comment``."""
    if not content.strip():
        raise ValidationError("Comment content must not be blank.")
    return Comment(
        id=new_id(),
        author=author.username if author is not None else GUEST_AUTHOR,
        content=content,
        created_at=utcnow(),
    )


def edit_comment(comment: Comment, content: str) -> Comment:
    """Return a copy of ``comment`` carrying new content."""
    if not content.strip():
        raise ValidationError("Comment content must not be blank.")
    return comment.model_copy(update={"content": content})
