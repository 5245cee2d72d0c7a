"""Patient domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_cpf, validate_email, validate_name, validate_phone


class PatientCreate(BaseModel):
    """Schema for registering a patient"""

    name: str
    cpf: Optional[str] = None
    birthDate: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v):
        return validate_cpf(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) or None

    @field_validator("birthDate", mode="before")
    @classmethod
    def empty_birth_date(cls, v):
        return v or None


class PatientUpdate(PatientCreate):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        return validate_name(v)


class PatientResponse(BaseModel):
    id: str
    name: str
    cpf: Optional[str] = None
    birthDate: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
