"""Unit domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_clock_time, validate_name, validate_phone


class UnitCreate(BaseModel):
    """Schema for creating a clinic unit"""

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    openingTime: Optional[str] = None
    closingTime: Optional[str] = None
    visitDuration: int = Field(default=15, ge=5)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("openingTime", "closingTime")
    @classmethod
    def check_time(cls, v):
        return validate_clock_time(v)


class UnitUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    openingTime: Optional[str] = None
    closingTime: Optional[str] = None
    visitDuration: Optional[int] = Field(default=None, ge=5)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        return validate_name(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("openingTime", "closingTime")
    @classmethod
    def check_time(cls, v):
        return validate_clock_time(v)


class UnitResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    openingTime: Optional[str] = None
    closingTime: Optional[str] = None
    visitDuration: int
    created_at: Optional[datetime] = None
