"""Phone number utilities for lead forms and demo calls."""

import re


def digits_only(phone: str) -> str:
    """Strip everything but digits: (281) 788-2316 → 2817882316."""
    return re.sub(r'\D', '', phone)


def to_us_e164(phone: str) -> str:
    """Format a US number to E.164 (+1XXXXXXXXXX).

    Handles:
        281-788-2316   → +12817882316
        1-281-788-2316 → +12817882316
    """
    digits = digits_only(phone)
    if len(digits) == 11 and digits.startswith('1'):
        return f"+{digits}"
    return f"+1{digits}"


def to_dial_string(phone: str) -> str:
    """Prefix +1 unless the number already carries a country code."""
    return phone if phone.startswith('+') else f"+1{phone}"


def display_us_phone(phone: str) -> str:
    """Drop the leading US country code for human-readable notifications."""
    digits = digits_only(phone)
    return digits[1:] if digits.startswith('1') else digits
