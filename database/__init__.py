"""Database package public API."""

from .connection import LedgerConnectionPool, close_db_pool, get_db_pool, init_db_pool
from .migrations import run_migrations
from .models import ContactDetails, Participant, SpinOutcome
from .repositories import LedgerStore, ParticipantRepository, SpinOutcomeRepository

__all__ = [
    "LedgerConnectionPool",
    "close_db_pool",
    "get_db_pool",
    "init_db_pool",
    "run_migrations",
    "ContactDetails",
    "Participant",
    "SpinOutcome",
    "LedgerStore",
    "ParticipantRepository",
    "SpinOutcomeRepository",
]
