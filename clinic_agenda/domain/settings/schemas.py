"""Settings schemas - appointment types, insurers and insurance plans"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_name


class NamedCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)


class AppointmentTypeResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InsurerResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InsurancePlanResponse(BaseModel):
    id: str
    insurer_id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
