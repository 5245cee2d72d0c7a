"""Patient service - Business logic for patient operations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import TenantContext
from ...models import Appointment, Patient
from .repository import PatientRepository
from .schemas import PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)


class PatientService:
    """Service layer for patient business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientRepository()

    def get_patients(self, context: TenantContext, search: Optional[str] = None) -> list[Patient]:
        return self.repo.get_patients(self.db, context.organization_id, search)

    def get_patient(self, patient_id: str, context: TenantContext) -> Patient:
        patient = self.repo.get_patient(self.db, patient_id, context.organization_id)
        if not patient:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    def create_patient(self, data: PatientCreate, context: TenantContext) -> Patient:
        logger.info(f"📥 Registering patient for organization {context.organization_id}")
        return self.repo.create_patient(
            self.db,
            context.organization_id,
            name=data.name,
            tax_id=data.cpf,
            birth_date=data.birthDate,
            phone=data.phone,
            email=data.email,
        )

    def update_patient(self, patient_id: str, data: PatientUpdate, context: TenantContext) -> Patient:
        patient = self.get_patient(patient_id, context)
        return self.repo.update_patient(
            self.db,
            patient,
            name=data.name,
            tax_id=data.cpf,
            birth_date=data.birthDate,
            phone=data.phone,
            email=data.email,
        )

    def delete_patient(self, patient_id: str, context: TenantContext) -> dict:
        patient = self.get_patient(patient_id, context)
        if self.db.query(Appointment.id).filter(Appointment.patient_id == patient.id).first():
            raise HTTPException(status_code=409, detail="Patient has appointments and cannot be deleted")
        self.repo.delete_patient(self.db, patient)
        return {"message": "Patient deleted"}
