"""Sample the reward selector and compare observed shares with the table.

Usage:
    python scripts/simulate_rewards.py --spins 100000 --seed 7
"""

from __future__ import annotations

import argparse
import math
import random
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from services.reward_selector import RewardSelector
from services.rewards import RewardTable


def simulate(table: RewardTable, spins: int, seed: int | None = None) -> Counter:
    selector = RewardSelector(table, random.Random(seed).random)
    return Counter(selector.select().name for _ in range(spins))


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate booth spins")
    parser.add_argument("--spins", type=int, default=100_000, help="Number of spins to sample")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a repeatable run")
    parser.add_argument("--rewards-file", default=None, help="JSON reward table, default table when omitted")
    args = parser.parse_args()

    table = RewardTable.from_file(args.rewards_file) if args.rewards_file else RewardTable()
    counts = simulate(table, args.spins, args.seed)
    total_weight = table.total_weight

    print(f"{'reward':<20} {'expected':>9} {'observed':>9} {'sigma':>7}")
    for reward in table:
        expected = reward.weight / total_weight
        observed = counts[reward.name] / args.spins
        stderr = math.sqrt(expected * (1 - expected) / args.spins) or 1.0
        print(f"{reward.name:<20} {expected:>9.4f} {observed:>9.4f} {(observed - expected) / stderr:>7.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
