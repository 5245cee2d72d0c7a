"""Patient repository - Database operations for patients"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Patient


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def get_patients(db: Session, organization_id: str, search: Optional[str] = None) -> list[Patient]:
        """Patients by name; ``search`` matches name, CPF or email"""
        query = db.query(Patient).filter(Patient.organization_id == organization_id)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    Patient.name.ilike(search_term),
                    Patient.tax_id.like(f"%{search}%"),
                    Patient.email.ilike(search_term),
                )
            )

        return query.order_by(Patient.name.asc()).all()

    @staticmethod
    def get_patient(db: Session, patient_id: str, organization_id: str) -> Optional[Patient]:
        return (
            db.query(Patient)
            .filter(Patient.id == patient_id, Patient.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_patient(db: Session, organization_id: str, **patient_data) -> Patient:
        patient = Patient(organization_id=organization_id, **patient_data)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def update_patient(db: Session, patient: Patient, **updates) -> Patient:
        for key, value in updates.items():
            if value is not None and hasattr(patient, key):
                setattr(patient, key, value)

        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def delete_patient(db: Session, patient: Patient) -> None:
        db.delete(patient)
        db.commit()
