"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Database constants
class DatabaseDefaults:
    """Default database configuration."""
    POOL_SIZE = 5
    BUSY_TIMEOUT = 5000  # milliseconds


# Spin wheel constants
class SpinDefaults:
    """Spin animation configuration."""
    DURATION_SECONDS = 4.5
    MIN_FULL_ROTATIONS = 5
    MAX_FULL_ROTATIONS = 7
    FULL_TURN_DEGREES = 360.0


# Booth session constants
class SessionDefaults:
    """Booth session registry configuration."""
    TTL_SECONDS = 1800
    MAX_ACTIVE = 5000


class LeadLimits:
    """Lead form field limits."""
    NAME_MIN = 2
    NAME_MAX = 100
    EMAIL_MAX = 255
    PHONE_MIN = 8
    PHONE_MAX = 20
    ORGANIZATION_MIN = 2
    ORGANIZATION_MAX = 200
    PHONE_NUMBER_DIGITS = 10
    PHONE_COUNTRY_FALLBACK = 3


# Personal mailbox providers rejected by the lead form
PERSONAL_EMAIL_DOMAINS = frozenset({
    "gmail.com", "yahoo.com", "outlook.com", "hotmail.com", "protonmail.com",
    "aol.com", "icloud.com", "mail.com", "zoho.com", "yandex.com",
    "gmx.com", "live.com", "msn.com", "inbox.com", "me.com",
    "yahoo.co.in", "yahoo.co.uk", "rediffmail.com", "fastmail.com",
    "tutanota.com", "mailfence.com", "hushmail.com",
})


class SessionStep(str, Enum):
    """Booth session state."""
    LANDING = "landing"
    FORM = "form"
    SPIN = "spin"
    SUCCESS = "success"
    ALREADY_PLAYED = "already_played"
