"""Maps a reward to the wheel rotation that lands it under the pointer.

The pointer is fixed at the top of the wheel (0 degrees). Sector ``i`` spans
``[i * sector, (i + 1) * sector)`` clockwise from the top, and the wheel
spins clockwise, so the pointer sits over the centre of sector ``i`` once the
wheel has turned ``360 - centre(i)`` degrees modulo a full turn.
"""

from __future__ import annotations

from typing import Callable

from core import SpinDefaults
from services.rewards import Reward, RewardTable

FULL_TURN = SpinDefaults.FULL_TURN_DEGREES


def sector_angle(sector_count: int) -> float:
    if sector_count < 1:
        raise ValueError("Wheel needs at least one sector")
    return FULL_TURN / sector_count


def sector_center(index: int, sector_count: int) -> float:
    angle = sector_angle(sector_count)
    return index * angle + angle / 2


def landing_angle(index: int, sector_count: int) -> float:
    """Rotation modulo a full turn that puts sector ``index`` under the pointer."""
    return (FULL_TURN - sector_center(index, sector_count)) % FULL_TURN


def target_rotation(
    table: RewardTable,
    reward: Reward,
    reward_index: int,
    prior_full_rotations: int = 0,
) -> float:
    """Absolute wheel rotation in degrees for the given reward.

    ``prior_full_rotations`` only adds whole turns for the animation and never
    changes which sector ends up under the pointer.

    Raises:
        ValueError: If ``reward_index`` is not the reward's position in the table
    """
    if not 0 <= reward_index < len(table) or table[reward_index] != reward:
        raise ValueError(f"Reward {reward.name!r} is not at sector {reward_index}")
    if prior_full_rotations < 0:
        raise ValueError("Full rotations cannot be negative")

    return prior_full_rotations * FULL_TURN + landing_angle(reward_index, len(table))


def random_full_rotations(
    rng: Callable[[int, int], int],
    minimum: int = SpinDefaults.MIN_FULL_ROTATIONS,
    maximum: int = SpinDefaults.MAX_FULL_ROTATIONS,
) -> int:
    """Cosmetic whole-turn count drawn inclusively from ``[minimum, maximum]``.

    ``rng`` has the signature of ``random.randint``.
    """
    return rng(minimum, maximum)
