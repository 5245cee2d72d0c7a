"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_email, validate_name

ProfileRole = Literal["admin", "manager", "supervisor", "front_desk", "doctor"]


class ProfileCreate(BaseModel):
    """Profile row without an auth identity (linked later by email)"""

    name: str
    email: str
    role: ProfileRole = "front_desk"
    defaultUnitId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[ProfileRole] = None
    defaultUnitId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class ProfileWithAuthCreate(ProfileCreate):
    """Creates the auth identity and the profile together"""

    password: str = Field(min_length=6)
    organizationId: Optional[str] = None


class UnitSwitchRequest(BaseModel):
    unitId: str


class ProfileResponse(BaseModel):
    id: str
    userId: Optional[str] = None
    organizationId: str
    name: str
    email: str
    role: str
    currentUnitId: Optional[str] = None
    defaultUnitId: Optional[str] = None
    defaultUnitName: Optional[str] = None
    created_at: Optional[datetime] = None
