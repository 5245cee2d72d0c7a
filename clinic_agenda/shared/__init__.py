"""Shared utilities used across domains"""

from .validators import (
    to_clinic_time,
    validate_clock_time,
    validate_cpf,
    validate_email,
    validate_name,
    validate_phone,
    validate_uuid,
)

__all__ = [
    "to_clinic_time",
    "validate_clock_time",
    "validate_cpf",
    "validate_email",
    "validate_name",
    "validate_phone",
    "validate_uuid",
]
