"""Doctor domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_name


class DoctorCreate(BaseModel):
    name: str
    licenseNumber: str  # CRM
    specialtyId: Optional[str] = None
    userId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("licenseNumber")
    @classmethod
    def check_license(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError("CRM is required")
        return v


class DoctorUpdate(BaseModel):
    name: Optional[str] = None
    licenseNumber: Optional[str] = None
    specialtyId: Optional[str] = None
    userId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        return validate_name(v)


class DoctorResponse(BaseModel):
    id: str
    name: str
    licenseNumber: Optional[str] = None
    specialtyId: Optional[str] = None
    specialtyName: Optional[str] = None
    userId: Optional[str] = None
    created_at: Optional[datetime] = None


class SpecialtyCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)


class SpecialtyResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
