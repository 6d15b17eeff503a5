"""Booth metrics using Prometheus, plus host metrics for the health check."""

from __future__ import annotations

from typing import Iterable

import psutil
from prometheus_client import Counter, Gauge


spins_total = Counter("booth_spins_total", "Spins started", labelnames=("reward",))
spin_commit_failures = Counter("booth_spin_commit_failures_total", "Spin outcomes that could not be recorded")
already_played_total = Counter("booth_already_played_total", "Lead submissions refused because the contact already played")
registrations_total = Counter("booth_registrations_total", "Lead submissions accepted", labelnames=("kind",))
active_sessions = Gauge("booth_active_sessions", "Booth sessions held in memory")
db_connections = Gauge("db_connection_pool_size", "DB connection pool size")
outcomes_recorded = Gauge("booth_outcomes_recorded", "Stored spin outcomes", labelnames=("reward",))


class PerformanceMonitor:
    def __init__(self) -> None:
        self.metrics = {
            "spins_total": spins_total,
            "spin_commit_failures": spin_commit_failures,
            "already_played_total": already_played_total,
            "registrations_total": registrations_total,
            "active_sessions": active_sessions,
            "db_connections": db_connections,
            "outcomes_recorded": outcomes_recorded,
        }

    def record_spin(self, reward_name: str) -> None:
        spins_total.labels(reward=reward_name).inc()

    def record_commit_failure(self) -> None:
        spin_commit_failures.inc()

    def record_already_played(self) -> None:
        already_played_total.inc()

    def record_registration(self, is_new: bool) -> None:
        registrations_total.labels(kind="new" if is_new else "resumed").inc()

    def record_active_sessions(self, count: int) -> None:
        active_sessions.set(count)

    def record_db_pool(self, pool_size: int) -> None:
        db_connections.set(pool_size)

    def record_outcome_counts(self, counts: Iterable[tuple[str, int]]) -> None:
        for reward_name, value in counts:
            outcomes_recorded.labels(reward=reward_name).set(value)

    def gather_host_metrics(self) -> dict:
        process = psutil.Process()
        memory_info = process.memory_info()
        return {
            "memory_rss": memory_info.rss,
            "cpu_percent": process.cpu_percent(interval=None),
        }
