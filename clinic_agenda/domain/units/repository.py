"""Unit repository - Database operations for clinic units"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Unit


class UnitRepository:
    """Repository for unit database operations"""

    @staticmethod
    def get_units(db: Session, organization_id: str) -> list[Unit]:
        return db.query(Unit).filter(Unit.organization_id == organization_id).order_by(Unit.name.asc()).all()

    @staticmethod
    def get_unit(db: Session, unit_id: str, organization_id: str) -> Optional[Unit]:
        return db.query(Unit).filter(Unit.id == unit_id, Unit.organization_id == organization_id).first()

    @staticmethod
    def create_unit(db: Session, organization_id: str, **unit_data) -> Unit:
        unit = Unit(organization_id=organization_id, **unit_data)
        db.add(unit)
        db.commit()
        db.refresh(unit)
        return unit

    @staticmethod
    def update_unit(db: Session, unit: Unit, **updates) -> Unit:
        for key, value in updates.items():
            if value is not None and hasattr(unit, key):
                setattr(unit, key, value)

        db.commit()
        db.refresh(unit)
        return unit

    @staticmethod
    def delete_unit(db: Session, unit: Unit) -> None:
        db.delete(unit)
        db.commit()
