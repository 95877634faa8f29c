"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

from ..config import DEFAULT_COUNTRY_CODE


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Local numbers (leading 0) get DEFAULT_COUNTRY_CODE; "00" international
    prefixes are treated like "+".

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format (+CCNNNNNNN)

    Raises:
        ValueError: If phone number is blank or invalid
    """
    if phone is None:
        return None

    phone = phone.strip()
    if not phone:
        raise ValueError("Phone number is required")
    has_plus = phone.startswith("+")

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    if not has_plus:
        if digits.startswith("00"):
            digits = digits[2:]
        elif digits.startswith("0"):
            digits = DEFAULT_COUNTRY_CODE + digits[1:]

    # E.164 allows at most 15 digits
    if len(digits) < 8 or len(digits) > 15:
        raise ValueError("Phone number must have between 8 and 15 digits")

    return f"+{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email is blank or malformed
    """
    if email is None:
        return None

    email = email.strip().lower()
    if not email:
        raise ValueError("Email is required")

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
