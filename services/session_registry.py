"""In-memory registry mapping booth session tokens to their flows."""

from __future__ import annotations

import asyncio
import threading
import uuid
from typing import Callable, Tuple

from cachetools import TTLCache

from core import SessionDefaults, get_logger
from core.exceptions import SessionNotFoundError
from services.session_flow import SessionFlow
from utils.performance import PerformanceMonitor

logger = get_logger(__name__)
monitor = PerformanceMonitor()


class SessionCache(TTLCache):
    """TTLCache that reports sessions pushed out to make room."""

    def popitem(self):
        token, flow = super().popitem()
        logger.warning(
            f"Session capacity reached, evicted booth session {token[:8]} at {flow.state.value}",
            extra={"participant_id": flow.participant_id}
        )
        return token, flow


class SessionRegistry:
    """Token → SessionFlow map with expiry.

    Each flow belongs to exactly one token; nothing else is shared between
    sessions. Web worker threads reach the registry concurrently, so access
    goes through a lock.
    """

    def __init__(
        self,
        flow_factory: Callable[[], SessionFlow],
        ttl: int = SessionDefaults.TTL_SECONDS,
        maxsize: int = SessionDefaults.MAX_ACTIVE,
    ) -> None:
        self._flow_factory = flow_factory
        self._sessions: SessionCache = SessionCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> Tuple[str, SessionFlow]:
        token = uuid.uuid4().hex
        flow = self._flow_factory()
        with self._lock:
            self._sessions[token] = flow
            count = len(self._sessions)
        monitor.record_active_sessions(count)
        logger.debug(f"Opened booth session {token[:8]}")
        return token, flow

    def get(self, token: str) -> SessionFlow:
        with self._lock:
            flow = self._sessions.get(token)
        if flow is None:
            raise SessionNotFoundError(f"Unknown or expired session {token[:8]}")
        return flow

    def discard(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)
            count = len(self._sessions)
        monitor.record_active_sessions(count)

    async def settle(self) -> int:
        """Wait for outcome commits of spins still animating.

        Returns:
            Number of commits waited for
        """
        with self._lock:
            pending = [
                flow.commit_task for flow in self._sessions.values()
                if flow.commit_task is not None and not flow.commit_task.done()
            ]
        if pending:
            logger.info(f"Waiting for {len(pending)} spin outcome(s) to be recorded")
            await asyncio.gather(*pending, return_exceptions=True)
        return len(pending)
