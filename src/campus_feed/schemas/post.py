"""Post and comment schemas."""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from campus_feed.core.time import ensure_aware

from .common import Record


class Comment(Record):
    """Reply attached to exactly one post."""

    id: str
    author: str
    content: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _aware_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class Post(Record):
    """A piece of feed content, optionally tagged as a calendar event."""

    id: str
    organization: str
    author: str
    heading: str
    body: str
    is_event: bool = False
    event_date: datetime | None = None
    created_at: datetime
    likes: int = 0
    comments: list[Comment] = Field(default_factory=list)

    @field_validator("created_at", "event_date")
    @classmethod
    def _aware_timestamp(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        return ensure_aware(v)

    @model_validator(mode="after")
    def _drop_event_date_for_plain_posts(self) -> "Post":
        # An event date only exists on event posts.
        if not self.is_event:
            self.event_date = None
        return self

    def find_comment(self, comment_id: str) -> Comment | None:
        """Return the comment with ``comment_id`` or None."""
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None
