"""Database schema migrations."""

from __future__ import annotations

from .connection import LedgerConnectionPool


SCHEMA_SQL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS participants (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        contact_key TEXT UNIQUE NOT NULL,
        full_name TEXT NOT NULL,
        phone_country TEXT NOT NULL,
        phone_number TEXT NOT NULL,
        organization_name TEXT NOT NULL,
        registered_at TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_participants_registered_at ON participants(registered_at);",
    # One outcome per participant, enforced by the store
    """
    CREATE TABLE IF NOT EXISTS spin_outcomes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        participant_id INTEGER UNIQUE NOT NULL,
        reward_name TEXT NOT NULL,
        reward_weight REAL NOT NULL,
        awarded_at TEXT NOT NULL,
        FOREIGN KEY(participant_id) REFERENCES participants(id)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_spin_outcomes_reward ON spin_outcomes(reward_name);",
)


async def run_migrations(pool: LedgerConnectionPool) -> None:
    async with pool.connection() as conn:
        await conn.execute("BEGIN")
        try:
            for statement in SCHEMA_SQL:
                await conn.execute(statement)
        except Exception:
            await conn.rollback()
            raise
        else:
            await conn.commit()
