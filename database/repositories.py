"""Participant ledger store backed by SQLite."""

from __future__ import annotations

import dataclasses
import sqlite3
from datetime import datetime
from typing import List, Optional, Tuple

from core.exceptions import AlreadyCommittedError, DatabaseError, DuplicateKeyConflictError
from database.base_repository import BaseRepository
from database.connection import LedgerConnectionPool
from database.models import ContactDetails, Participant, SpinOutcome

_PARTICIPANT_COLUMNS = (
    "id, contact_key, full_name, phone_country, phone_number, organization_name, registered_at"
)
_OUTCOME_COLUMNS = "id, participant_id, reward_name, reward_weight, awarded_at"


def _is_unique_violation(error: sqlite3.IntegrityError) -> bool:
    return "UNIQUE" in str(error).upper()


def _participant_from_row(row: Tuple) -> Participant:
    pid, contact_key, full_name, phone_country, phone_number, organization, registered_at = row
    return Participant(
        id=pid,
        contact_key=contact_key,
        full_name=full_name,
        contact=ContactDetails(
            phone_country=phone_country,
            phone_number=phone_number,
            organization_name=organization,
        ),
        registered_at=datetime.fromisoformat(registered_at),
    )


def _outcome_from_row(row: Tuple) -> SpinOutcome:
    oid, participant_id, reward_name, reward_weight, awarded_at = row
    return SpinOutcome(
        id=oid,
        participant_id=participant_id,
        reward_name=reward_name,
        reward_weight=reward_weight,
        awarded_at=datetime.fromisoformat(awarded_at),
    )


class ParticipantRepository(BaseRepository):
    """Repository for participant operations."""

    async def find_by_contact_key(self, contact_key: str) -> Optional[Participant]:
        row = await self.fetch_one(
            f"SELECT {_PARTICIPANT_COLUMNS} FROM participants WHERE contact_key=?",
            (contact_key,)
        )
        return _participant_from_row(row) if row else None

    async def create(self, participant: Participant) -> Participant:
        """Insert a participant; the contact key must not exist yet.

        Raises:
            DuplicateKeyConflictError: If another session created the key first
        """
        try:
            new_id = await self.insert(
                """
                INSERT INTO participants
                (contact_key, full_name, phone_country, phone_number, organization_name, registered_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    participant.contact_key,
                    participant.full_name,
                    participant.contact.phone_country,
                    participant.contact.phone_number,
                    participant.contact.organization_name,
                    participant.registered_at.isoformat(),
                )
            )
        except sqlite3.IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateKeyConflictError(participant.contact_key) from e
            raise DatabaseError(f"Participant rejected by store: {e}") from e
        return dataclasses.replace(participant, id=new_id)

    async def count(self) -> int:
        return await self.fetch_value("SELECT COUNT(*) FROM participants") or 0


class SpinOutcomeRepository(BaseRepository):
    """Repository for spin outcome operations."""

    async def find_by_participant(self, participant_id: int) -> Optional[SpinOutcome]:
        row = await self.fetch_one(
            f"SELECT {_OUTCOME_COLUMNS} FROM spin_outcomes WHERE participant_id=?",
            (participant_id,)
        )
        return _outcome_from_row(row) if row else None

    async def create(self, outcome: SpinOutcome) -> SpinOutcome:
        """Insert an outcome; at most one may exist per participant.

        Raises:
            AlreadyCommittedError: If an outcome is already stored, carrying it
        """
        try:
            new_id = await self.insert(
                """
                INSERT INTO spin_outcomes (participant_id, reward_name, reward_weight, awarded_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    outcome.participant_id,
                    outcome.reward_name,
                    outcome.reward_weight,
                    outcome.awarded_at.isoformat(),
                )
            )
        except sqlite3.IntegrityError as e:
            if _is_unique_violation(e):
                existing = await self.find_by_participant(outcome.participant_id)
                raise AlreadyCommittedError(outcome.participant_id, existing) from e
            raise DatabaseError(f"Spin outcome rejected by store: {e}") from e
        return dataclasses.replace(outcome, id=new_id)

    async def reward_counts(self) -> List[Tuple[str, int]]:
        """Count stored outcomes per reward name."""
        return await self.fetch_all(
            "SELECT reward_name, COUNT(*) FROM spin_outcomes GROUP BY reward_name ORDER BY reward_name"
        )


class LedgerStore:
    """The four store operations the participant ledger relies on."""

    def __init__(self, pool: Optional[LedgerConnectionPool] = None) -> None:
        self.participants = ParticipantRepository(pool)
        self.outcomes = SpinOutcomeRepository(pool)

    async def find_participant(self, contact_key: str) -> Optional[Participant]:
        return await self.participants.find_by_contact_key(contact_key)

    async def create_participant(self, participant: Participant) -> Participant:
        return await self.participants.create(participant)

    async def find_outcome(self, participant_id: int) -> Optional[SpinOutcome]:
        return await self.outcomes.find_by_participant(participant_id)

    async def create_outcome(self, outcome: SpinOutcome) -> SpinOutcome:
        return await self.outcomes.create(outcome)
