"""One-spin-per-participant protocol on top of the ledger store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core import get_logger
from core.exceptions import AlreadyCommittedError
from database.models import ContactDetails, Participant, SpinOutcome
from database.repositories import LedgerStore
from services.rewards import Reward
from utils.validators import normalize_contact_key

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Registration:
    is_new_participant: bool
    participant_id: int
    existing_outcome: Optional[SpinOutcome] = None

    @property
    def already_played(self) -> bool:
        return self.existing_outcome is not None


class ParticipantLedger:
    """Decides whether a contact may spin and records the outcome once.

    Uniqueness of the contact key and of the outcome per participant is left
    to the store. This class only translates what the store reports:

    * a concurrent participant creation raises ``DuplicateKeyConflictError``;
      callers re-resolve with ``register_or_resume`` instead of creating again
    * a second commit raises ``AlreadyCommittedError`` and leaves the stored
      outcome untouched
    * store failures raise ``StoreUnavailableError``
    """

    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    async def register_or_resume(
        self,
        contact_key: str,
        name: str,
        contact_details: ContactDetails,
    ) -> Registration:
        """Register a new participant or resume an existing one.

        Existing participants are never updated; a re-submission with a
        different name or organisation keeps the original record.

        Raises:
            DuplicateKeyConflictError: If another session registered the key concurrently
            StoreUnavailableError: If the store cannot be read or written
        """
        contact_key = normalize_contact_key(contact_key)
        participant = await self.store.find_participant(contact_key)

        if participant is None:
            participant = await self.store.create_participant(
                Participant(
                    contact_key=contact_key,
                    full_name=name,
                    contact=contact_details,
                    registered_at=datetime.now(timezone.utc),
                )
            )
            logger.info(
                f"Registered participant {participant.id}",
                extra={"participant_id": participant.id, "contact_key": contact_key}
            )
            return Registration(is_new_participant=True, participant_id=participant.id)

        outcome = await self.store.find_outcome(participant.id)
        if outcome is not None:
            logger.info(
                f"Participant {participant.id} already played ({outcome.reward_name})",
                extra={"participant_id": participant.id, "contact_key": contact_key}
            )
        else:
            logger.info(
                f"Resuming participant {participant.id} at spin",
                extra={"participant_id": participant.id, "contact_key": contact_key}
            )
        return Registration(
            is_new_participant=False,
            participant_id=participant.id,
            existing_outcome=outcome,
        )

    async def commit_outcome(self, participant_id: int, reward: Reward) -> SpinOutcome:
        """Record the participant's single spin outcome.

        Raises:
            AlreadyCommittedError: If an outcome exists; the stored one is attached
            StoreUnavailableError: If the store cannot be written
        """
        try:
            outcome = await self.store.create_outcome(
                SpinOutcome(
                    participant_id=participant_id,
                    reward_name=reward.name,
                    reward_weight=reward.weight,
                    awarded_at=datetime.now(timezone.utc),
                )
            )
        except AlreadyCommittedError as e:
            stored = e.existing.reward_name if e.existing else "unknown"
            logger.warning(
                f"Outcome for participant {participant_id} already committed as {stored}",
                extra={"participant_id": participant_id}
            )
            raise

        logger.info(
            f"Committed {reward.name} for participant {participant_id}",
            extra={"participant_id": participant_id}
        )
        return outcome

    async def find_outcome(self, participant_id: int) -> Optional[SpinOutcome]:
        return await self.store.find_outcome(participant_id)
