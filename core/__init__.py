"""Core application components."""

# Import in correct order to avoid circular dependencies
from core.logger import setup_logger, get_logger
from core.constants import (
    DatabaseDefaults,
    SpinDefaults,
    SessionDefaults,
    LeadLimits,
    PERSONAL_EMAIL_DOMAINS,
    SessionStep,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    DatabaseError,
    StoreUnavailableError,
    DuplicateKeyConflictError,
    AlreadyCommittedError,
    ValidationError,
    SessionFlowError,
    InvalidTransitionError,
    SpinAlreadyStartedError,
    SessionNotFoundError,
)

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'DatabaseDefaults',
    'SpinDefaults',
    'SessionDefaults',
    'LeadLimits',
    'PERSONAL_EMAIL_DOMAINS',
    'SessionStep',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'DatabaseError',
    'StoreUnavailableError',
    'DuplicateKeyConflictError',
    'AlreadyCommittedError',
    'ValidationError',
    'SessionFlowError',
    'InvalidTransitionError',
    'SpinAlreadyStartedError',
    'SessionNotFoundError',
]
