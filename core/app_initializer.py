"""Application initialization orchestrator."""

from __future__ import annotations

import asyncio
import functools
import os
from contextlib import suppress
from typing import Optional

from aiohttp import web as aiohttp_web
from aiohttp_wsgi import WSGIHandler

from config import Config, load_config
from core.logger import get_logger
from database import LedgerStore, close_db_pool, init_db_pool, run_migrations
from services.async_runner import set_main_loop
from services.participant_ledger import ParticipantLedger
from services.rewards import RewardTable
from services.session_flow import SessionFlow
from services.session_registry import SessionRegistry

logger = get_logger(__name__)


class ApplicationInitializer:
    """Orchestrates application initialization and lifecycle."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.db_pool = None
        self.reward_table: Optional[RewardTable] = None
        self.ledger: Optional[ParticipantLedger] = None
        self.sessions: Optional[SessionRegistry] = None
        self.web_runner = None

    async def initialize(self) -> None:
        """Initialize all application components."""
        set_main_loop(asyncio.get_running_loop())
        await self._init_database()
        self._init_booth()
        await self._init_web_server()

    async def run(self) -> None:
        """Serve until cancelled."""
        try:
            logger.info("🎡 Booth running...")
            while True:
                await asyncio.sleep(3600)
        except (KeyboardInterrupt, asyncio.CancelledError):
            logger.info("Shutting down...")
        finally:
            await self.cleanup()

    async def cleanup(self) -> None:
        """Cleanup resources."""
        with suppress(Exception):
            if self.web_runner:
                await self.web_runner.cleanup()
        if self.sessions:
            # Spins already on screen still get their outcome recorded
            await self.sessions.settle()
        with suppress(Exception):
            await close_db_pool()
        set_main_loop(None)

    async def _init_database(self) -> None:
        """Initialize database pool and run migrations."""
        self.db_pool = await init_db_pool(
            database_path=self.config.database_path,
            pool_size=self.config.db_pool_size,
            busy_timeout_ms=self.config.db_busy_timeout,
        )
        await run_migrations(self.db_pool)
        logger.info("✅ Database initialized")

    def _init_booth(self) -> None:
        """Build the reward table, ledger and session registry."""
        if self.config.rewards_file:
            self.reward_table = RewardTable.from_file(self.config.rewards_file)
        else:
            self.reward_table = RewardTable()

        self.ledger = ParticipantLedger(LedgerStore(self.db_pool))
        flow_factory = functools.partial(
            SessionFlow,
            self.ledger,
            self.reward_table,
            spin_duration=self.config.spin_duration_seconds,
            min_full_rotations=self.config.spin_min_full_rotations,
            max_full_rotations=self.config.spin_max_full_rotations,
        )
        self.sessions = SessionRegistry(
            flow_factory,
            ttl=self.config.session_ttl_seconds,
            maxsize=self.config.max_active_sessions,
        )
        logger.info(f"✅ Booth ready with {len(self.reward_table)} rewards")

    async def _init_web_server(self) -> None:
        """Initialize web server."""
        from web import create_app

        flask_app = create_app(
            self.config,
            reward_table=self.reward_table,
            sessions=self.sessions,
            ledger=self.ledger,
        )

        # Flask views run in the WSGI handler's worker threads
        wsgi_handler = WSGIHandler(flask_app)

        aio_app = aiohttp_web.Application()
        aio_app.router.add_route("*", "/{path_info:.*}", wsgi_handler)

        self.web_runner = aiohttp_web.AppRunner(aio_app)
        await self.web_runner.setup()

        # Bind to PORT env var if present (Render/Heroku)
        effective_port = int(os.getenv("PORT", str(self.config.web_port)))
        effective_host = "0.0.0.0" if os.getenv("PORT") else self.config.web_host

        site = aiohttp_web.TCPSite(self.web_runner, effective_host, effective_port)
        await site.start()

        logger.info(f"🚀 Web server started on http://{effective_host}:{effective_port}")
