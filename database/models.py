"""Ledger records implemented as plain dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class ContactDetails:
    phone_country: str
    phone_number: str
    organization_name: str


@dataclass(frozen=True, slots=True)
class Participant:
    contact_key: str
    full_name: str
    contact: ContactDetails
    registered_at: datetime
    id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SpinOutcome:
    participant_id: int
    reward_name: str
    reward_weight: float
    awarded_at: datetime
    id: Optional[int] = None
