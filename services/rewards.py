"""Static reward table shown on the booth wheel."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from core import get_logger
from core.exceptions import ConfigurationError

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Reward:
    name: str
    weight: float
    color: str


DEFAULT_REWARDS: tuple[Reward, ...] = (
    Reward(name="Orgwide Survey", weight=0.55, color="#043570"),
    Reward(name="Orgwide Webinar", weight=0.15, color="#0a5cad"),
    Reward(name="Yoga Session", weight=0.10, color="#00C0FF"),
    Reward(name="Group Coaching", weight=0.10, color="#0891b2"),
    Reward(name="D&I Session", weight=0.10, color="#065f8a"),
)


class RewardTable:
    """Ordered, immutable sequence of rewards.

    Position in the table is the wheel sector index, so the order must not
    change for the lifetime of the process.
    """

    def __init__(self, rewards: Sequence[Reward] = DEFAULT_REWARDS) -> None:
        rewards = tuple(rewards)
        if not rewards:
            raise ConfigurationError("Reward table must contain at least one reward")

        seen = set()
        for reward in rewards:
            if not reward.weight > 0:
                raise ConfigurationError(f"Reward {reward.name!r} must have a positive weight")
            if reward.name in seen:
                raise ConfigurationError(f"Duplicate reward name {reward.name!r}")
            seen.add(reward.name)

        self._rewards = rewards
        self._index = {reward.name: i for i, reward in enumerate(rewards)}

    def __iter__(self) -> Iterator[Reward]:
        return iter(self._rewards)

    def __len__(self) -> int:
        return len(self._rewards)

    def __getitem__(self, index: int) -> Reward:
        return self._rewards[index]

    @property
    def total_weight(self) -> float:
        return sum(reward.weight for reward in self._rewards)

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Unknown reward {name!r}") from None

    def get(self, name: str) -> Optional[Reward]:
        index = self._index.get(name)
        return self._rewards[index] if index is not None else None

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Wheel payload for the presentation layer, in sector order."""
        return [
            {"index": i, "name": r.name, "weight": r.weight, "color": r.color}
            for i, r in enumerate(self._rewards)
        ]

    @classmethod
    def from_file(cls, path: str) -> "RewardTable":
        """Load a table from a JSON list of ``{"name", "weight", "color"}`` objects."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            rewards = [
                Reward(name=str(item["name"]), weight=float(item["weight"]), color=str(item["color"]))
                for item in raw
            ]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise ConfigurationError(f"Cannot load reward table from {path}: {e}") from e

        logger.info(f"Loaded {len(rewards)} rewards from {path}")
        return cls(rewards)
