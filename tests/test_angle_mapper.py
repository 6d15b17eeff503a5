"""Unit tests for reward to wheel rotation mapping."""

import random

import pytest

from services.angle_mapper import (
    landing_angle,
    random_full_rotations,
    sector_angle,
    sector_center,
    target_rotation,
)


def test_sector_geometry_for_five_rewards():
    """Test sector size and centres on a five-reward wheel."""
    assert sector_angle(5) == 72
    assert sector_center(0, 5) == 36
    assert sector_center(4, 5) == 324


def test_sector_angle_needs_sectors():
    """Test a wheel without sectors is rejected."""
    with pytest.raises(ValueError):
        sector_angle(0)


@pytest.mark.parametrize("index, expected", [(0, 324), (1, 252), (2, 180), (3, 108), (4, 36)])
def test_landing_angle_centres_sector_under_pointer(reward_table, index, expected):
    """Test the landing angle puts the sector centre under the pointer."""
    reward = reward_table[index]
    rotation = target_rotation(reward_table, reward, index, prior_full_rotations=0)
    assert rotation % 360 == pytest.approx(expected)
    assert landing_angle(index, len(reward_table)) == pytest.approx(expected)


@pytest.mark.parametrize("turns", [0, 1, 5, 6, 7, 25])
def test_extra_turns_never_change_landing(reward_table, turns):
    """Test whole turns do not move the landing position."""
    for index, reward in enumerate(reward_table):
        rotation = target_rotation(reward_table, reward, index, prior_full_rotations=turns)
        expected = (360 - sector_center(index, len(reward_table))) % 360
        assert rotation % 360 == pytest.approx(expected)
        assert rotation == pytest.approx(turns * 360 + expected)


def test_mapping_is_deterministic(reward_table):
    """Test the same reward and turns always give the same rotation."""
    reward = reward_table[3]
    assert target_rotation(reward_table, reward, 3, 6) == target_rotation(reward_table, reward, 3, 6)


def test_index_must_match_reward(reward_table):
    """Test a reward index that disagrees with the table is rejected."""
    with pytest.raises(ValueError):
        target_rotation(reward_table, reward_table[0], 1, 5)
    with pytest.raises(ValueError):
        target_rotation(reward_table, reward_table[0], 9, 5)


def test_negative_turns_rejected(reward_table):
    """Test negative whole turns are rejected."""
    with pytest.raises(ValueError):
        target_rotation(reward_table, reward_table[0], 0, -1)


def test_random_full_rotations_stays_in_range():
    """Test random whole turns stay within the inclusive range."""
    rng = random.Random(3)
    draws = {random_full_rotations(rng.randint, 5, 7) for _ in range(200)}
    assert draws == {5, 6, 7}


def test_random_full_rotations_uses_injected_source():
    """Test whole turns come from the injected source."""
    assert random_full_rotations(lambda low, high: high) == 7
    assert random_full_rotations(lambda low, high: low, minimum=2, maximum=4) == 2
