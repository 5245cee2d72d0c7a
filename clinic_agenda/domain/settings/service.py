"""Settings service - appointment types, insurers (convênios) and their plans"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import TenantContext
from ...models import Appointment, AppointmentType, InsurancePlan, Insurer

logger = logging.getLogger(__name__)


class SettingsService:
    """Reference data used by the appointment form"""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _delete(self, row) -> None:
        self.db.delete(row)
        self.db.commit()

    # Appointment types
    def get_appointment_types(self, context: TenantContext) -> list[AppointmentType]:
        return (
            self.db.query(AppointmentType)
            .filter(AppointmentType.organization_id == context.organization_id)
            .order_by(AppointmentType.name.asc())
            .all()
        )

    def create_appointment_type(self, name: str, context: TenantContext) -> AppointmentType:
        return self._add(AppointmentType(organization_id=context.organization_id, name=name))

    def delete_appointment_type(self, type_id: str, context: TenantContext) -> dict:
        row = (
            self.db.query(AppointmentType)
            .filter(AppointmentType.id == type_id, AppointmentType.organization_id == context.organization_id)
            .first()
        )
        if not row:
            raise HTTPException(status_code=404, detail="Appointment type not found")
        if self.db.query(Appointment.id).filter(Appointment.appointment_type_id == row.id).first():
            raise HTTPException(status_code=409, detail="Appointment type is in use")
        self._delete(row)
        return {"message": "Appointment type deleted"}

    # Insurers
    def get_insurers(self, context: TenantContext) -> list[Insurer]:
        return (
            self.db.query(Insurer)
            .filter(Insurer.organization_id == context.organization_id)
            .order_by(Insurer.name.asc())
            .all()
        )

    def get_insurer(self, insurer_id: str, context: TenantContext) -> Insurer:
        insurer = (
            self.db.query(Insurer)
            .filter(Insurer.id == insurer_id, Insurer.organization_id == context.organization_id)
            .first()
        )
        if not insurer:
            raise HTTPException(status_code=404, detail="Insurer not found")
        return insurer

    def create_insurer(self, name: str, context: TenantContext) -> Insurer:
        return self._add(Insurer(organization_id=context.organization_id, name=name))

    def delete_insurer(self, insurer_id: str, context: TenantContext) -> dict:
        insurer = self.get_insurer(insurer_id, context)
        if self.db.query(Appointment.id).filter(Appointment.insurer_id == insurer.id).first():
            raise HTTPException(status_code=409, detail="Insurer is in use")
        self._delete(insurer)
        logger.info(f"🗑️ Insurer {insurer_id} deleted with its plans")
        return {"message": "Insurer deleted"}

    # Plans
    def get_plans(self, insurer_id: str, context: TenantContext) -> list[InsurancePlan]:
        insurer = self.get_insurer(insurer_id, context)
        return (
            self.db.query(InsurancePlan)
            .filter(InsurancePlan.insurer_id == insurer.id)
            .order_by(InsurancePlan.name.asc())
            .all()
        )

    def create_plan(self, insurer_id: str, name: str, context: TenantContext) -> InsurancePlan:
        insurer = self.get_insurer(insurer_id, context)
        return self._add(InsurancePlan(insurer_id=insurer.id, name=name))

    def delete_plan(self, plan_id: str, context: TenantContext) -> dict:
        plan = (
            self.db.query(InsurancePlan)
            .join(Insurer, InsurancePlan.insurer_id == Insurer.id)
            .filter(InsurancePlan.id == plan_id, Insurer.organization_id == context.organization_id)
            .first()
        )
        if not plan:
            raise HTTPException(status_code=404, detail="Insurance plan not found")
        if self.db.query(Appointment.id).filter(Appointment.insurance_plan_id == plan.id).first():
            raise HTTPException(status_code=409, detail="Insurance plan is in use")
        self._delete(plan)
        return {"message": "Insurance plan deleted"}
