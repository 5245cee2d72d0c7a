"""Doctor router - FastAPI endpoints for doctors and specialties"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from ...models import Doctor
from .schemas import (
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    SpecialtyCreate,
    SpecialtyResponse,
)
from .service import DoctorService

router = APIRouter(tags=["Doctors"])


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    """Dependency injection for DoctorService"""
    return DoctorService(db)


def doctor_response(d: Doctor) -> DoctorResponse:
    return DoctorResponse(
        id=d.id,
        name=d.name,
        licenseNumber=d.license_number,
        specialtyId=d.specialty_id,
        specialtyName=d.specialty.name if d.specialty else None,
        userId=d.user_id,
        created_at=d.created_at,
    )


@router.get("/doctors", response_model=list[DoctorResponse])
async def get_doctors(
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    """Doctors of the organization with their specialty"""
    return [doctor_response(d) for d in service.get_doctors(context)]


@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return doctor_response(service.get_doctor(doctor_id, context))


@router.post("/doctors", response_model=DoctorResponse)
async def create_doctor(
    data: DoctorCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return doctor_response(service.create_doctor(data, context))


@router.patch("/doctors/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: str,
    data: DoctorUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return doctor_response(service.update_doctor(doctor_id, data, context))


@router.delete("/doctors/{doctor_id}")
async def delete_doctor(
    doctor_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return service.delete_doctor(doctor_id, context)


# ============================================================================
# SPECIALTIES
# ============================================================================


@router.get("/specialties", response_model=list[SpecialtyResponse])
async def get_specialties(
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return service.get_specialties(context)


@router.post("/specialties", response_model=SpecialtyResponse)
async def create_specialty(
    data: SpecialtyCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return service.create_specialty(data, context)


@router.delete("/specialties/{specialty_id}")
async def delete_specialty(
    specialty_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: DoctorService = Depends(get_doctor_service),
):
    return service.delete_specialty(specialty_id, context)
