"""Shared base class for stored records."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base model for records that round-trip through durable storage.

    Attributes use snake_case in Python and camelCase on disk, so a stored
    payload looks like ``{"rewardPoints": 3, "likedPosts": [...]}``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict[str, Any]:
        """Return the JSON-compatible representation written to storage."""
        return self.model_dump(mode="json", by_alias=True)
