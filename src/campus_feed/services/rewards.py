"""Reward catalog helpers."""

from __future__ import annotations

from collections.abc import Iterable

from campus_feed.schemas.reward import Reward
from campus_feed.schemas.user import User

PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"

DEFAULT_REWARDS: tuple[Reward, ...] = (
    Reward(id="reward1", image=PLACEHOLDER_IMAGE, name="Reward 1", cost=100),
    Reward(id="reward2", image=PLACEHOLDER_IMAGE, name="Reward 2", cost=200),
)


def affordable_rewards(user: User | None, rewards: Iterable[Reward]) -> list[Reward]:
    """Return the rewards whose cost the user's balance covers."""
    if user is None:
        return []
    return [reward for reward in rewards if reward.cost <= user.reward_points]


def points_needed(user: User | None, reward: Reward) -> int:
    """Return how many more points the user needs for ``reward``."""
    balance = user.reward_points if user is not None else 0
    return max(int(reward.cost - balance), 0)
