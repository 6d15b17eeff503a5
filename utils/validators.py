"""Lead form validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from core.constants import PERSONAL_EMAIL_DOMAINS, LeadLimits


NAME_RE = re.compile(r"^[a-zA-Z\s]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ORGANIZATION_RE = re.compile(r"^[a-zA-Z0-9\s.&\-']+$")


@dataclass(frozen=True, slots=True)
class LeadData:
    full_name: str
    work_email: str
    phone: str
    organization_name: str


def normalize_contact_key(email: str) -> str:
    return email.strip().lower()


def validate_full_name(value: str) -> Optional[str]:
    stripped = (value or "").strip()
    if len(stripped) < LeadLimits.NAME_MIN:
        return "Name must be at least 2 characters"
    if len(stripped) > LeadLimits.NAME_MAX:
        return "Name must be less than 100 characters"
    if not NAME_RE.match(stripped):
        return "Only letters and spaces allowed"
    return None


def validate_work_email(value: str) -> Optional[str]:
    stripped = (value or "").strip()
    if not EMAIL_RE.match(stripped):
        return "Please enter a valid email address"
    if len(stripped) > LeadLimits.EMAIL_MAX:
        return "Email is too long"
    domain = stripped.rsplit("@", 1)[1].lower()
    if domain in PERSONAL_EMAIL_DOMAINS:
        return "Please use your company email address"
    return None


def validate_phone(value: str) -> Optional[str]:
    value = value or ""
    if len(value) < LeadLimits.PHONE_MIN:
        return "Please enter a valid phone number"
    if len(value) > LeadLimits.PHONE_MAX:
        return "Phone number is too long"
    return None


def validate_organization(value: str) -> Optional[str]:
    stripped = (value or "").strip()
    if len(stripped) < LeadLimits.ORGANIZATION_MIN:
        return "Organization name must be at least 2 characters"
    if len(stripped) > LeadLimits.ORGANIZATION_MAX:
        return "Organization name is too long"
    if not ORGANIZATION_RE.match(stripped):
        return "Only letters, numbers, and basic punctuation allowed"
    return None


def validate_lead(payload: Mapping[str, Any]) -> Tuple[Optional[LeadData], Dict[str, str]]:
    """Validate a submitted lead form.

    Args:
        payload: Form fields keyed ``fullName``, ``workEmail``, ``phone``
            and ``organizationName``

    Returns:
        Tuple of (lead, errors). ``lead`` is None whenever ``errors`` is non-empty.
    """
    fields = {
        key: payload.get(key) if isinstance(payload.get(key), str) else ""
        for key in ("fullName", "workEmail", "phone", "organizationName")
    }
    checks = {
        "fullName": validate_full_name,
        "workEmail": validate_work_email,
        "phone": validate_phone,
        "organizationName": validate_organization,
    }

    errors = {}
    for key, check in checks.items():
        message = check(fields[key])
        if message:
            errors[key] = message

    if errors:
        return None, errors

    return LeadData(
        full_name=fields["fullName"].strip(),
        work_email=fields["workEmail"].strip(),
        phone=fields["phone"],
        organization_name=fields["organizationName"].strip(),
    ), {}


def split_phone(phone: str) -> Tuple[str, str]:
    """Split a country-prefixed phone string into (country, number).

    Length heuristic: the last ten characters are the number when the string
    is longer than ten, otherwise the first three are the country code. This
    misreads numbers whose national part is not ten digits.
    """
    if len(phone) > LeadLimits.PHONE_NUMBER_DIGITS:
        country_length = len(phone) - LeadLimits.PHONE_NUMBER_DIGITS
    else:
        country_length = LeadLimits.PHONE_COUNTRY_FALLBACK
    return phone[:country_length], phone[country_length:]
