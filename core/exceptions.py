"""Application-wide exception classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from database.models import SpinOutcome


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class DatabaseError(ApplicationError):
    """Base exception for ledger store errors."""
    pass


class StoreUnavailableError(DatabaseError):
    """Raised when the ledger store cannot be reached or fails mid-operation."""
    pass


class DuplicateKeyConflictError(DatabaseError):
    """Raised when a participant with the same contact key was created concurrently."""

    def __init__(self, contact_key: str) -> None:
        super().__init__(f"Participant already exists for {contact_key}")
        self.contact_key = contact_key


class AlreadyCommittedError(DatabaseError):
    """Raised when a spin outcome is already recorded for the participant."""

    def __init__(self, participant_id: int, existing: Optional[SpinOutcome] = None) -> None:
        super().__init__(f"Spin outcome already committed for participant {participant_id}")
        self.participant_id = participant_id
        self.existing = existing


class ValidationError(ApplicationError):
    """Raised when lead data validation fails."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors


class SessionFlowError(ApplicationError):
    """Base exception for booth session errors."""
    pass


class InvalidTransitionError(SessionFlowError):
    """Raised when a session step is requested out of order."""
    pass


class SpinAlreadyStartedError(SessionFlowError):
    """Raised when a second spin is requested for the same session."""
    pass


class SessionNotFoundError(SessionFlowError):
    """Raised when a session token is unknown or expired."""
    pass
