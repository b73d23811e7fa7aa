"""Reward catalog schema."""

from .common import Record


class Reward(Record):
    """Static catalog entry a user could spend reward points on."""

    id: str
    image: str
    name: str
    cost: int
