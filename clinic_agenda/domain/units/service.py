"""Unit service - Business logic for clinic units"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import TenantContext
from ...models import Appointment, Unit
from .repository import UnitRepository
from .schemas import UnitCreate, UnitUpdate

logger = logging.getLogger(__name__)


class UnitService:
    """Service layer for unit business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UnitRepository()

    def get_units(self, context: TenantContext) -> list[Unit]:
        return self.repo.get_units(self.db, context.organization_id)

    def get_unit(self, unit_id: str, context: TenantContext) -> Unit:
        unit = self.repo.get_unit(self.db, unit_id, context.organization_id)
        if not unit:
            raise HTTPException(status_code=404, detail="Unit not found")
        return unit

    def create_unit(self, data: UnitCreate, context: TenantContext) -> Unit:
        logger.info(f"📥 Creating unit '{data.name}' for organization {context.organization_id}")
        return self.repo.create_unit(
            self.db,
            context.organization_id,
            name=data.name,
            address=data.address,
            phone=data.phone,
            opening_time=data.openingTime,
            closing_time=data.closingTime,
            visit_duration=data.visitDuration,
        )

    def update_unit(self, unit_id: str, data: UnitUpdate, context: TenantContext) -> Unit:
        unit = self.get_unit(unit_id, context)
        return self.repo.update_unit(
            self.db,
            unit,
            name=data.name,
            address=data.address,
            phone=data.phone,
            opening_time=data.openingTime,
            closing_time=data.closingTime,
            visit_duration=data.visitDuration,
        )

    def delete_unit(self, unit_id: str, context: TenantContext) -> dict:
        unit = self.get_unit(unit_id, context)

        has_appointments = (
            self.db.query(Appointment.id).filter(Appointment.unit_id == unit.id).first() is not None
        )
        if has_appointments:
            raise HTTPException(status_code=409, detail="Unit has appointments and cannot be deleted")

        try:
            self.repo.delete_unit(self.db, unit)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete unit {unit_id}: {e}")
            raise HTTPException(status_code=409, detail="Unit is still referenced and cannot be deleted") from e

        return {"message": "Unit deleted"}
