"""
Form Validation Helpers.

Shared rules for the booking and account forms: Indian mobile numbers
and required free-text fields.
"""

import re
from typing import Dict, List, Optional

# Indian mobile numbers: 10 ASCII digits, leading digit 6-9
INDIAN_MOBILE_PATTERN = re.compile(r"[6-9][0-9]{9}")
NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: Optional[str]) -> str:
    """Strip every non-digit character from a phone string."""
    if not phone:
        return ""
    return NON_DIGITS.sub("", phone)


def validate_phone(phone: Optional[str]) -> bool:
    """
    Check whether a phone string is a valid Indian mobile number.

    Formatting characters (spaces, dashes, parentheses, a leading '+')
    are ignored; the remaining digits must be exactly 10 long and start
    with 6, 7, 8 or 9.

    Args:
        phone: The phone number as typed by the user

    Returns:
        True if the number is acceptable
    """
    return INDIAN_MOBILE_PATTERN.fullmatch(normalize_phone(phone)) is not None


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty and whitespace-only strings."""
    return value is None or not value.strip()


def missing_fields(values: Dict[str, Optional[str]]) -> List[str]:
    """Return the names of required fields that are blank, in input order."""
    return [name for name, value in values.items() if is_blank(value)]
