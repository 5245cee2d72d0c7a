"""Doctor service - Business logic for doctors and specialties"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import TenantContext
from ...models import Appointment, Doctor, Specialty
from .repository import DoctorRepository
from .schemas import DoctorCreate, DoctorUpdate, SpecialtyCreate

logger = logging.getLogger(__name__)


class DoctorService:
    """Service layer for doctor business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DoctorRepository()

    def _check_specialty(self, specialty_id: Optional[str], context: TenantContext) -> None:
        if specialty_id and not self.repo.get_specialty(self.db, specialty_id, context.organization_id):
            raise HTTPException(status_code=404, detail="Specialty not found")

    def get_doctors(self, context: TenantContext) -> list[Doctor]:
        return self.repo.get_doctors(self.db, context.organization_id)

    def get_doctor(self, doctor_id: str, context: TenantContext) -> Doctor:
        doctor = self.repo.get_doctor(self.db, doctor_id, context.organization_id)
        if not doctor:
            raise HTTPException(status_code=404, detail="Doctor not found")
        return doctor

    def create_doctor(self, data: DoctorCreate, context: TenantContext) -> Doctor:
        self._check_specialty(data.specialtyId, context)
        logger.info(f"📥 Registering doctor '{data.name}' (CRM {data.licenseNumber})")
        return self.repo.create_doctor(
            self.db,
            context.organization_id,
            name=data.name,
            license_number=data.licenseNumber,
            specialty_id=data.specialtyId,
            user_id=data.userId,
        )

    def update_doctor(self, doctor_id: str, data: DoctorUpdate, context: TenantContext) -> Doctor:
        doctor = self.get_doctor(doctor_id, context)
        self._check_specialty(data.specialtyId, context)
        return self.repo.update_doctor(
            self.db,
            doctor,
            name=data.name,
            license_number=data.licenseNumber,
            specialty_id=data.specialtyId,
            user_id=data.userId,
        )

    def delete_doctor(self, doctor_id: str, context: TenantContext) -> dict:
        doctor = self.get_doctor(doctor_id, context)
        if self.db.query(Appointment.id).filter(Appointment.doctor_id == doctor.id).first():
            raise HTTPException(status_code=409, detail="Doctor has appointments and cannot be deleted")
        self.repo.delete(self.db, doctor)
        return {"message": "Doctor deleted"}

    # Specialties
    def get_specialties(self, context: TenantContext) -> list[Specialty]:
        return self.repo.get_specialties(self.db, context.organization_id)

    def create_specialty(self, data: SpecialtyCreate, context: TenantContext) -> Specialty:
        return self.repo.create_specialty(self.db, context.organization_id, data.name)

    def delete_specialty(self, specialty_id: str, context: TenantContext) -> dict:
        specialty = self.repo.get_specialty(self.db, specialty_id, context.organization_id)
        if not specialty:
            raise HTTPException(status_code=404, detail="Specialty not found")

        # Doctors keep existing without a specialty
        self.db.query(Doctor).filter(Doctor.specialty_id == specialty.id).update(
            {Doctor.specialty_id: None}, synchronize_session=False
        )
        self.repo.delete(self.db, specialty)
        return {"message": "Specialty deleted"}
