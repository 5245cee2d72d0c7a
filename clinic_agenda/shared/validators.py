"""Shared validation utilities"""

import re
import uuid
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import CLINIC_TIMEZONE

CLOCK_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_name(name: str) -> str:
    """Names must have at least 2 characters once trimmed."""
    name = (name or "").strip()
    if len(name) < 2:
        raise ValueError("Name must have at least 2 characters")
    return name


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_cpf(cpf: Optional[str]) -> Optional[str]:
    """
    Normalize a Brazilian CPF to its 11 digits.

    Punctuation (``123.456.789-09``) is stripped. Check digits are not
    verified; clinics register foreign patients with placeholder numbers.

    Raises:
        ValueError: If fewer or more than 11 digits remain
    """
    if not cpf:
        return None

    digits = re.sub(r"\D", "", cpf)
    if len(digits) != 11:
        raise ValueError("CPF must have 11 digits")
    return digits


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a phone number loosely: at least 8 digits.

    The number is stored as typed (trimmed) so local formatting survives.
    """
    if not phone:
        return None

    phone = phone.strip()
    if len(re.sub(r"\D", "", phone)) < 8:
        raise ValueError("Invalid phone number")
    return phone


def validate_clock_time(value: Optional[str]) -> Optional[str]:
    """Validate an ``HH:MM`` time of day (24h)."""
    if not value:
        return None

    value = value.strip()
    # Accept HH:MM:SS as stored by some clients and keep minutes precision
    if re.match(r"^\d{2}:\d{2}:\d{2}$", value):
        value = value[:5]
    if not CLOCK_TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def to_clinic_time(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to naive wall-clock time in the clinic timezone.

    Appointments are stored naive, so an offset-aware value (``...Z`` from a
    browser's ``toISOString()``) is converted first. Naive values pass as is.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(CLINIC_TIMEZONE)).replace(tzinfo=None)
