"""Lightweight end-to-end smoke test of the booth API.

Prepares the configured database, then drives one visitor from landing to
reward through the Flask test client:
    SPIN_DURATION_SECONDS=0.1 python scripts/smoke_test.py
"""

from __future__ import annotations

import asyncio
import sys
import threading
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import load_config
from core.app_initializer import ApplicationInitializer
from services.async_runner import run_coroutine_sync, set_main_loop
from web import create_app


def main() -> None:
    config = load_config()

    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()

    booth = ApplicationInitializer(config)

    async def _prepare() -> None:
        set_main_loop(asyncio.get_running_loop())
        await booth._init_database()
        booth._init_booth()

    asyncio.run_coroutine_threadsafe(_prepare(), loop).result()

    app = create_app(
        config,
        testing=True,
        reward_table=booth.reward_table,
        sessions=booth.sessions,
        ledger=booth.ledger,
    )
    client = app.test_client()

    try:
        resp = client.get("/metrics")
        assert resp.status_code == 200, f"/metrics failed: {resp.status_code}"

        resp = client.get("/health")
        assert resp.status_code == 200, f"/health failed: {resp.status_code}"

        resp = client.get("/api/rewards")
        assert resp.status_code == 200, f"/api/rewards failed: {resp.status_code}"

        token = client.post("/api/session").get_json()["token"]
        client.post(f"/api/session/{token}/form")
        resp = client.post(f"/api/session/{token}/lead", json={
            "fullName": "Smoke Test",
            "workEmail": f"smoke-{uuid.uuid4().hex[:8]}@example.org",
            "phone": "+15550001234",
            "organizationName": "Smoke Co",
        })
        assert resp.status_code == 200, f"lead failed: {resp.status_code} {resp.get_json()}"

        spin = client.post(f"/api/session/{token}/spin").get_json()["spin"]
        result = client.post(f"/api/session/{token}/complete").get_json()["result"]
        assert result["reward"] == spin["reward"], "revealed reward differs from the wheel target"

        print(f"Smoke OK: {result['reward']} at {spin['rotation']:.1f}°, recorded={result['recorded']}")
    finally:
        run_coroutine_sync(booth.cleanup())
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)


if __name__ == "__main__":
    main()
