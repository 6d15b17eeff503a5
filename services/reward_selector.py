"""Weighted reward selection."""

from __future__ import annotations

import random
from typing import Callable

from core import get_logger
from services.rewards import Reward, RewardTable

logger = get_logger(__name__)

RandomSource = Callable[[], float]


def select_reward(table: RewardTable, rng: RandomSource = random.random) -> Reward:
    """Draw one reward with probability proportional to its weight.

    Weights are normalised by their total, so they need not sum to 1.
    ``rng`` must return a float in ``[0, 1)``.

    Args:
        table: Reward table to draw from
        rng: Random source; pass a seeded or fixed source for deterministic draws

    Returns:
        The first reward whose cumulative share reaches the draw. If rounding
        leaves the draw above the final cumulative share, the last reward.
    """
    total = table.total_weight
    draw = rng()
    cumulative = 0.0

    for reward in table:
        cumulative += reward.weight / total
        if draw <= cumulative:
            return reward

    logger.debug(f"Draw {draw!r} above cumulative share {cumulative!r}, using last reward")
    return table[len(table) - 1]


class RewardSelector:
    """Binds a reward table to a random source."""

    def __init__(self, table: RewardTable, rng: RandomSource = random.random) -> None:
        self.table = table
        self.rng = rng

    def select(self) -> Reward:
        return select_reward(self.table, self.rng)
