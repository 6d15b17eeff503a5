"""Pytest configuration and fixtures."""

import asyncio
import threading
from pathlib import Path

import pytest

from config import Config
from database import LedgerStore, close_db_pool, init_db_pool, run_migrations
from database.connection import LedgerConnectionPool
from services.async_runner import set_main_loop
from services.participant_ledger import ParticipantLedger
from services.rewards import RewardTable
from utils.validators import LeadData


@pytest.fixture
def fixed_rng():
    """Factory for random sources returning the given values in order, repeating the last one."""
    def make(*values):
        queue = list(values)

        def draw():
            return queue.pop(0) if len(queue) > 1 else queue[0]

        return draw

    return make


def make_config(tmp_path: Path, **overrides) -> Config:
    settings = dict(
        environment="testing",
        debug=False,
        web_host="127.0.0.1",
        web_port=5000,
        secret_key="test-secret",
        database_path=str(tmp_path / "booth.sqlite"),
        db_pool_size=2,
        db_busy_timeout=2000,
        log_folder=str(tmp_path / "logs"),
        rewards_file=None,
        spin_duration_seconds=0.05,
        spin_min_full_rotations=5,
        spin_max_full_rotations=7,
        session_ttl_seconds=600,
        max_active_sessions=100,
        rewards_cache_ttl=60,
    )
    settings.update(overrides)
    return Config(**settings)


@pytest.fixture
def reward_table():
    return RewardTable()


@pytest.fixture
def lead():
    return LeadData(
        full_name="Ada Lovelace",
        work_email="Ada@Co.com",
        phone="+441234567890",
        organization_name="Analytical Engines Ltd",
    )


@pytest.fixture
async def ledger_pool(tmp_path):
    """Migrated SQLite ledger in a temporary directory."""
    pool = LedgerConnectionPool(str(tmp_path / "ledger.sqlite"), pool_size=2, busy_timeout_ms=2000)
    await pool.init_pool()
    await run_migrations(pool)
    yield pool
    await pool.close()


@pytest.fixture
def store(ledger_pool):
    return LedgerStore(ledger_pool)


@pytest.fixture
def ledger(store):
    return ParticipantLedger(store)


@pytest.fixture
def booth_loop(tmp_path):
    """Event loop running in a background thread, as the web server's main loop."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    set_main_loop(loop)

    def run(coro, timeout=10):
        return asyncio.run_coroutine_threadsafe(coro, loop).result(timeout)

    yield run

    run(close_db_pool())
    set_main_loop(None)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()


@pytest.fixture
def booth_app(tmp_path, booth_loop):
    """Flask app wired to a migrated ledger on the background loop."""
    from core.app_initializer import ApplicationInitializer
    from web import create_app

    config = make_config(tmp_path)
    booth = ApplicationInitializer(config)

    async def prepare():
        await booth._init_database()
        booth._init_booth()

    booth_loop(prepare())
    app = create_app(
        config,
        testing=True,
        reward_table=booth.reward_table,
        sessions=booth.sessions,
        ledger=booth.ledger,
    )
    app.config["BOOTH"] = booth
    yield app

    booth_loop(booth.sessions.settle())


@pytest.fixture
def client(booth_app):
    return booth_app.test_client()
