"""Unit tests for lead form validation."""

import pytest

from utils.validators import (
    normalize_contact_key,
    split_phone,
    validate_lead,
    validate_organization,
    validate_work_email,
)

VALID = {
    "fullName": "  Grace Hopper ",
    "workEmail": " Grace@Navy.MIL ",
    "phone": "+12025550143",
    "organizationName": "US Navy & Co.",
}


def test_valid_lead_is_trimmed():
    """Test a valid lead is accepted with trimmed fields."""
    lead, errors = validate_lead(VALID)
    assert errors == {}
    assert lead.full_name == "Grace Hopper"
    assert lead.work_email == "Grace@Navy.MIL"
    assert lead.organization_name == "US Navy & Co."


@pytest.mark.parametrize("field, value", [
    ("fullName", "G"),
    ("fullName", "Grace Hopper 3rd"),
    ("fullName", "x" * 101),
    ("workEmail", "not-an-email"),
    ("workEmail", "grace@gmail.com"),
    ("phone", "+1202"),
    ("phone", "+1" + "2" * 20),
    ("organizationName", "N"),
    ("organizationName", "Navy <script>"),
])
def test_invalid_fields_are_reported(field, value):
    """Test each invalid field is reported by key."""
    lead, errors = validate_lead({**VALID, field: value})
    assert lead is None
    assert list(errors) == [field]


def test_missing_fields_are_reported():
    """Test missing fields are reported as errors."""
    lead, errors = validate_lead({})
    assert lead is None
    assert set(errors) == {"fullName", "workEmail", "phone", "organizationName"}


def test_personal_domains_are_case_insensitive():
    """Test personal mail domains are refused in any case."""
    assert validate_work_email("someone@Yahoo.Co.UK") == "Please use your company email address"
    assert validate_work_email("someone@company.io") is None


def test_organization_allows_basic_punctuation():
    """Test organization names accept basic punctuation."""
    assert validate_organization("O'Brien-Smith & Sons Ltd.") is None


def test_normalize_contact_key():
    """Test contact key normalisation."""
    assert normalize_contact_key("  A@Co.COM ") == "a@co.com"


@pytest.mark.parametrize("phone, expected", [
    ("+919876543210", ("+91", "9876543210")),
    ("+12025550143", ("+1", "2025550143")),
    ("+4412345", ("+44", "12345")),
])
def test_split_phone_length_heuristic(phone, expected):
    """Test phone strings split into country and number by length."""
    assert split_phone(phone) == expected
