"""Account schemas - organization signup"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_email, validate_name


class SignupRequest(BaseModel):
    organizationName: str
    cnpj: Optional[str] = None
    userName: str
    email: str
    password: str = Field(min_length=6)

    @field_validator("organizationName", "userName")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)


class OrganizationResponse(BaseModel):
    id: str
    name: str
    cnpj: Optional[str] = None


class SignupResponse(BaseModel):
    user: dict[str, Any]
    organization: OrganizationResponse
    profileId: str
