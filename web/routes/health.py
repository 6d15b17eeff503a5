"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from core import get_logger
from core.exceptions import StoreUnavailableError
from database.connection import get_db_pool
from services.async_runner import run_coroutine_sync
from utils.performance import PerformanceMonitor

logger = get_logger(__name__)

health_bp = Blueprint("health", __name__)
monitor = PerformanceMonitor()


@health_bp.route("/health")
def health_check():
    db_pool = get_db_pool()
    registry = current_app.config.get("SESSION_REGISTRY")
    ledger = current_app.config.get("PARTICIPANT_LEDGER")
    monitor.record_db_pool(db_pool.size)

    data = {
        "status": "ok",
        "db_pool_size": db_pool.size,
        "db_pool_available": db_pool.available,
        "active_sessions": len(registry) if registry is not None else 0,
        "host": monitor.gather_host_metrics(),
    }

    if ledger is not None:
        try:
            counts = run_coroutine_sync(ledger.store.outcomes.reward_counts(), timeout=5)
        except StoreUnavailableError as e:
            logger.warning(f"Health check could not read outcomes: {e}")
            data["status"] = "degraded"
        else:
            monitor.record_outcome_counts(counts)
            data["outcomes"] = {name: count for name, count in counts}

    return jsonify(data)
