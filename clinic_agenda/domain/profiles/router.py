"""Profile router - FastAPI endpoints for staff profiles"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from ...models import Profile
from ...services.identity_service import AuthServiceError, IdentityClient, get_identity_client
from .schemas import (
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    ProfileWithAuthCreate,
    UnitSwitchRequest,
)
from .service import ProfileProvisioningError, ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


def profile_response(p: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=p.id,
        userId=p.user_id,
        organizationId=p.organization_id,
        name=p.name,
        email=p.email,
        role=p.role,
        currentUnitId=p.current_unit_id,
        defaultUnitId=p.default_unit_id,
        defaultUnitName=p.default_unit.name if p.default_unit else None,
        created_at=p.created_at,
    )


@router.get("", response_model=list[ProfileResponse])
async def get_profiles(
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    """Profiles of the organization with their default unit name"""
    return [profile_response(p) for p in service.get_profiles(context)]


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(context: TenantContext = Depends(get_tenant_context)):
    return profile_response(context.profile)


@router.post("/me/unit", response_model=ProfileResponse)
async def switch_unit(
    data: UnitSwitchRequest,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    return profile_response(service.switch_unit(data.unitId, context))


@router.post("/with-auth")
async def create_profile_with_auth(
    data: ProfileWithAuthCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
    identity: IdentityClient = Depends(get_identity_client),
):
    """Create the login and the profile of a staff member in one step"""
    try:
        result = await service.create_with_auth(data, context, identity)
    except (AuthServiceError, ProfileProvisioningError) as e:
        return JSONResponse(status_code=400, content={"error": e.message})

    return {
        "user": result["user"],
        "profile": profile_response(result["profile"]).model_dump(mode="json"),
    }


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    return profile_response(service.get_profile(profile_id, context))


@router.post("", response_model=ProfileResponse)
async def create_profile(
    data: ProfileCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    return profile_response(service.create_profile(data, context))


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    data: ProfileUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    return profile_response(service.update_profile(profile_id, data, context))


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.delete_profile(profile_id, context)
