"""Settings router - appointment types, insurers and insurance plans"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from .schemas import (
    AppointmentTypeResponse,
    InsurancePlanResponse,
    InsurerResponse,
    NamedCreate,
)
from .service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    """Dependency injection for SettingsService"""
    return SettingsService(db)


@router.get("/appointment-types", response_model=list[AppointmentTypeResponse])
async def get_appointment_types(
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get_appointment_types(context)


@router.post("/appointment-types", response_model=AppointmentTypeResponse)
async def create_appointment_type(
    data: NamedCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.create_appointment_type(data.name, context)


@router.delete("/appointment-types/{type_id}")
async def delete_appointment_type(
    type_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.delete_appointment_type(type_id, context)


@router.get("/insurers", response_model=list[InsurerResponse])
async def get_insurers(
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get_insurers(context)


@router.post("/insurers", response_model=InsurerResponse)
async def create_insurer(
    data: NamedCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.create_insurer(data.name, context)


@router.delete("/insurers/{insurer_id}")
async def delete_insurer(
    insurer_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.delete_insurer(insurer_id, context)


@router.get("/insurers/{insurer_id}/plans", response_model=list[InsurancePlanResponse])
async def get_plans(
    insurer_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get_plans(insurer_id, context)


@router.post("/insurers/{insurer_id}/plans", response_model=InsurancePlanResponse)
async def create_plan(
    insurer_id: str,
    data: NamedCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.create_plan(insurer_id, data.name, context)


@router.delete("/plans/{plan_id}")
async def delete_plan(
    plan_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SettingsService = Depends(get_settings_service),
):
    return service.delete_plan(plan_id, context)
