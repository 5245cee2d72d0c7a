"""Patient router - FastAPI endpoints for patient operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from ...models import Patient
from .schemas import PatientCreate, PatientResponse, PatientUpdate
from .service import PatientService

router = APIRouter(prefix="/patients", tags=["Patients"])


def get_patient_service(db: Session = Depends(get_db)) -> PatientService:
    """Dependency injection for PatientService"""
    return PatientService(db)


def patient_response(p: Patient) -> PatientResponse:
    return PatientResponse(
        id=p.id,
        name=p.name,
        cpf=p.tax_id,
        birthDate=p.birth_date,
        phone=p.phone,
        email=p.email,
        created_at=p.created_at,
    )


@router.get("", response_model=list[PatientResponse])
async def get_patients(
    search: Optional[str] = Query(None, description="Name, CPF or email fragment"),
    context: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service),
):
    return [patient_response(p) for p in service.get_patients(context, search)]


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service),
):
    return patient_response(service.get_patient(patient_id, context))


@router.post("", response_model=PatientResponse)
async def create_patient(
    data: PatientCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service),
):
    return patient_response(service.create_patient(data, context))


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: str,
    data: PatientUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service),
):
    return patient_response(service.update_patient(patient_id, data, context))


@router.delete("/{patient_id}")
async def delete_patient(
    patient_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service),
):
    return service.delete_patient(patient_id, context)
