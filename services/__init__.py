"""Services package."""

from .rewards import Reward, RewardTable, DEFAULT_REWARDS
from .reward_selector import RewardSelector, select_reward
from .angle_mapper import sector_angle, sector_center, landing_angle, target_rotation, random_full_rotations
from .participant_ledger import ParticipantLedger, Registration
from .session_flow import SessionFlow, LeadResult, SpinPlan, SpinResult
from .session_registry import SessionRegistry
from .async_runner import set_main_loop, run_coroutine_sync

__all__ = [
    "Reward",
    "RewardTable",
    "DEFAULT_REWARDS",
    "RewardSelector",
    "select_reward",
    "sector_angle",
    "sector_center",
    "landing_angle",
    "target_rotation",
    "random_full_rotations",
    "ParticipantLedger",
    "Registration",
    "SessionFlow",
    "LeadResult",
    "SpinPlan",
    "SpinResult",
    "SessionRegistry",
    "set_main_loop",
    "run_coroutine_sync",
]
