"""Doctor repository - Database operations for doctors and specialties"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Doctor, Specialty


class DoctorRepository:
    """Repository for doctor and specialty database operations"""

    @staticmethod
    def get_doctors(db: Session, organization_id: str) -> list[Doctor]:
        """Doctors with their specialty joined"""
        return (
            db.query(Doctor)
            .options(joinedload(Doctor.specialty))
            .filter(Doctor.organization_id == organization_id)
            .order_by(Doctor.name.asc())
            .all()
        )

    @staticmethod
    def get_doctor(db: Session, doctor_id: str, organization_id: str) -> Optional[Doctor]:
        return (
            db.query(Doctor)
            .filter(Doctor.id == doctor_id, Doctor.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_doctor(db: Session, organization_id: str, **doctor_data) -> Doctor:
        doctor = Doctor(organization_id=organization_id, **doctor_data)
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def update_doctor(db: Session, doctor: Doctor, **updates) -> Doctor:
        for key, value in updates.items():
            if value is not None and hasattr(doctor, key):
                setattr(doctor, key, value)

        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def delete(db: Session, row) -> None:
        db.delete(row)
        db.commit()

    # Specialties
    @staticmethod
    def get_specialties(db: Session, organization_id: str) -> list[Specialty]:
        return (
            db.query(Specialty)
            .filter(Specialty.organization_id == organization_id)
            .order_by(Specialty.name.asc())
            .all()
        )

    @staticmethod
    def get_specialty(db: Session, specialty_id: str, organization_id: str) -> Optional[Specialty]:
        return (
            db.query(Specialty)
            .filter(Specialty.id == specialty_id, Specialty.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_specialty(db: Session, organization_id: str, name: str) -> Specialty:
        specialty = Specialty(organization_id=organization_id, name=name)
        db.add(specialty)
        db.commit()
        db.refresh(specialty)
        return specialty
