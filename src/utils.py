"""Shared utilities used across the dialogue engine."""

import re

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DIGITS_ONLY = re.compile(r"[0-9]+")


def normalize_command(value: str) -> str:
    """Trim and case-fold a message for keyword comparisons.

    Examples:
        >>> normalize_command("  MENU ")
        'menu'
    """
    return value.strip().casefold()


def is_date_shaped(value: str) -> bool:
    """Check the YYYY-MM-DD shape only; calendar validity is left to the backend.

    Examples:
        >>> is_date_shaped("2026-02-01")
        True
        >>> is_date_shaped("2026-2-1")
        False
    """
    return _DATE_SHAPE.fullmatch(value) is not None


def is_digits(value: str) -> bool:
    """True when the value is a non-empty run of ASCII digits."""
    return _DIGITS_ONLY.fullmatch(value) is not None


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("591 600 12345")
        '59160012345'
        >>> normalize_phone("+591 (600) 12-345")
        '+59160012345'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)
