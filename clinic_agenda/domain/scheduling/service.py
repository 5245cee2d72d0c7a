"""Scheduling service - Business logic for appointments and the agenda"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import TenantContext, require_unit
from ...cache import invalidate_dashboard
from ...models import (
    Appointment,
    AppointmentType,
    Doctor,
    InsurancePlan,
    Insurer,
    Patient,
    ScheduleBlock,
    ScheduleConfig,
    Unit,
)
from ...shared.validators import validate_uuid
from .agenda import AgendaSlot, build_agenda_day
from .reschedule import AgendaBoard, AppointmentNotOnBoard, MoveResult, RescheduleFailed
from .repository import (
    SchedulingRepository,
    SqlAppointmentStore,
    to_agenda_appointment,
    to_agenda_block,
)
from .schemas import (
    AppointmentCreate,
    AppointmentMoveRequest,
    AppointmentUpdate,
    ScheduleBlockCreate,
    ScheduleConfigCreate,
)
from .slots import DEFAULT_VISIT_DURATION, InvalidSlotConfiguration, slots_for_unit

logger = logging.getLogger(__name__)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


class SchedulingService:
    """Service layer for appointments, agenda and schedule settings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()

    # ------------------------------------------------------------------
    # Lookups scoped to the caller's organization
    # ------------------------------------------------------------------

    def _get_scoped(self, model, row_id: str, context: TenantContext, label: str):
        if not validate_uuid(row_id):
            raise HTTPException(status_code=404, detail=f"{label} not found")
        row = (
            self.db.query(model)
            .filter(model.id == row_id, model.organization_id == context.organization_id)
            .first()
        )
        if not row:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return row

    def _check_plan(self, plan_id: str, insurer_id: Optional[str], context: TenantContext) -> None:
        plan = (
            self.db.query(InsurancePlan)
            .join(Insurer, InsurancePlan.insurer_id == Insurer.id)
            .filter(InsurancePlan.id == plan_id, Insurer.organization_id == context.organization_id)
            .first()
        )
        if not plan:
            raise HTTPException(status_code=404, detail="Insurance plan not found")
        if insurer_id and plan.insurer_id != insurer_id:
            raise HTTPException(status_code=400, detail="Insurance plan does not belong to the selected insurer")

    def _check_references(self, context: TenantContext, **refs) -> None:
        if refs.get("doctor_id"):
            self._get_scoped(Doctor, refs["doctor_id"], context, "Doctor")
        if refs.get("patient_id"):
            self._get_scoped(Patient, refs["patient_id"], context, "Patient")
        if refs.get("appointment_type_id"):
            self._get_scoped(AppointmentType, refs["appointment_type_id"], context, "Appointment type")
        if refs.get("insurer_id"):
            self._get_scoped(Insurer, refs["insurer_id"], context, "Insurer")
        if refs.get("insurance_plan_id"):
            self._check_plan(refs["insurance_plan_id"], refs.get("insurer_id"), context)

    def _commit_or_fail(self, action: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to {action}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to {action}: {e}") from e

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def list_appointments(
        self,
        context: TenantContext,
        window_start: datetime,
        window_end: datetime,
        doctor_id: Optional[str] = None,
    ) -> list[Appointment]:
        unit = require_unit(context)
        return self.repo.get_appointments(
            self.db, context.organization_id, unit.id, window_start, window_end, doctor_id
        )

    def get_appointment(self, appointment_id: str, context: TenantContext) -> Appointment:
        if not validate_uuid(appointment_id):
            raise HTTPException(status_code=404, detail="Appointment not found")
        appointment = self.repo.get_appointment(self.db, appointment_id, context.organization_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def create_appointment(self, data: AppointmentCreate, context: TenantContext) -> Appointment:
        """Book an appointment in the current unit; its end follows the unit's visit duration"""
        unit = require_unit(context)
        self._check_references(
            context,
            doctor_id=data.doctorId,
            patient_id=data.patientId,
            appointment_type_id=data.appointmentTypeId,
            insurer_id=data.insurerId,
            insurance_plan_id=data.insurancePlanId,
        )

        duration = unit.visit_duration or DEFAULT_VISIT_DURATION
        logger.info(f"📥 Booking appointment for patient {data.patientId} at {data.startAt.isoformat()}")

        appointment = self._commit_or_fail(
            "save appointment",
            self.repo.create_appointment,
            self.db,
            organization_id=context.organization_id,
            unit_id=unit.id,
            doctor_id=data.doctorId,
            patient_id=data.patientId,
            appointment_type_id=data.appointmentTypeId,
            insurer_id=data.insurerId,
            insurance_plan_id=data.insurancePlanId,
            start_at=data.startAt,
            end_at=data.startAt + timedelta(minutes=duration),
            status=data.status,
            notes=data.notes,
            fit_in=data.fitIn,
            booked_by_id=context.profile.id,
        )
        invalidate_dashboard(context.organization_id)
        return appointment

    def update_appointment(
        self, appointment_id: str, data: AppointmentUpdate, context: TenantContext
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id, context)
        self._check_references(
            context,
            doctor_id=data.doctorId,
            patient_id=data.patientId,
            appointment_type_id=data.appointmentTypeId,
            insurer_id=data.insurerId or appointment.insurer_id,
            insurance_plan_id=data.insurancePlanId,
        )

        updates = {}
        if data.doctorId is not None:
            updates["doctor_id"] = data.doctorId
        if data.patientId is not None:
            updates["patient_id"] = data.patientId
        if data.appointmentTypeId is not None:
            updates["appointment_type_id"] = data.appointmentTypeId
        if data.insurerId is not None:
            updates["insurer_id"] = data.insurerId
        if data.insurancePlanId is not None:
            updates["insurance_plan_id"] = data.insurancePlanId
        if data.status is not None:
            updates["status"] = data.status
        if data.notes is not None:
            updates["notes"] = data.notes
        if data.fitIn is not None:
            updates["fit_in"] = data.fitIn
        if data.startAt is not None:
            unit = self.db.query(Unit).filter(Unit.id == appointment.unit_id).first()
            duration = (unit.visit_duration if unit else None) or DEFAULT_VISIT_DURATION
            updates["start_at"] = data.startAt
            updates["end_at"] = data.startAt + timedelta(minutes=duration)

        appointment = self._commit_or_fail(
            "update appointment", self.repo.update_appointment, self.db, appointment, **updates
        )
        invalidate_dashboard(context.organization_id)
        return appointment

    def update_status(self, appointment_id: str, status: str, context: TenantContext) -> Appointment:
        """Any status may follow any other; changes are user-driven only"""
        appointment = self.get_appointment(appointment_id, context)
        logger.info(f"🔄 Appointment {appointment_id}: {appointment.status} -> {status}")
        appointment = self._commit_or_fail(
            "update appointment", self.repo.update_appointment, self.db, appointment, status=status
        )
        invalidate_dashboard(context.organization_id)
        return appointment

    def delete_appointment(self, appointment_id: str, context: TenantContext) -> dict:
        appointment = self.get_appointment(appointment_id, context)
        self._commit_or_fail("delete appointment", self.repo.delete_appointment, self.db, appointment)
        invalidate_dashboard(context.organization_id)
        return {"message": "Appointment deleted"}

    # ------------------------------------------------------------------
    # Agenda
    # ------------------------------------------------------------------

    def _load_board(self, organization_id: str, unit: Unit, day: date, doctor_id: Optional[str] = None):
        """Appointments and blocks of a unit for one agenda day (overnight hours included)"""
        window_start, window_end = day_bounds(day)
        slots = self._slots(unit, day)
        if slots:
            last_end = slots[-1] + timedelta(minutes=unit.visit_duration or DEFAULT_VISIT_DURATION)
            window_end = max(window_end, last_end)

        rows = self.repo.get_appointments(
            self.db, organization_id, unit.id, window_start, window_end, doctor_id
        )
        blocks = self.repo.get_blocks(self.db, organization_id, unit.id, window_start, window_end)
        return AgendaBoard(to_agenda_appointment(r) for r in rows), [to_agenda_block(b) for b in blocks]

    @staticmethod
    def _slots(unit: Unit, day: date) -> list[datetime]:
        try:
            return slots_for_unit(unit.opening_time, unit.closing_time, unit.visit_duration, day)
        except InvalidSlotConfiguration as e:
            logger.error(f"❌ Unit {unit.id} has an invalid schedule: {e}")
            raise HTTPException(status_code=400, detail=str(e)) from e

    def get_agenda_day(
        self,
        context: TenantContext,
        day: date,
        doctor_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[Unit, list[AgendaSlot]]:
        unit = require_unit(context)
        if doctor_id:
            self._get_scoped(Doctor, doctor_id, context, "Doctor")

        board, blocks = self._load_board(context.organization_id, unit, day, doctor_id)
        grid = build_agenda_day(
            unit.opening_time,
            unit.closing_time,
            unit.visit_duration,
            day,
            board.appointments,
            blocks,
            doctor_id=doctor_id,
            now=now,
        )
        return unit, grid

    def move_appointment(
        self, appointment_id: str, data: AppointmentMoveRequest, context: TenantContext
    ) -> MoveResult:
        """
        Drag-and-drop reschedule.

        The day's board is loaded, the move is applied to it optimistically
        and then persisted; a rejected write reverts the board.
        """
        appointment = self.get_appointment(appointment_id, context)
        self._get_scoped(Doctor, data.targetDoctorId, context, "Doctor")
        unit = self.db.query(Unit).filter(Unit.id == appointment.unit_id).first()
        if unit is None:
            raise HTTPException(status_code=404, detail="Unit not found")

        board, _ = self._load_board(context.organization_id, unit, appointment.start_at.date())
        store = SqlAppointmentStore(self.db, context.organization_id)

        try:
            board.get(appointment_id)
        except AppointmentNotOnBoard:
            # Spans past the loaded window (e.g. crosses midnight); move it on its own
            board = AgendaBoard([to_agenda_appointment(appointment)])

        try:
            result = board.move(appointment_id, data.targetStart, data.targetDoctorId, store)
        except RescheduleFailed as e:
            raise HTTPException(status_code=409, detail=e.reason) from e

        if not result.changed:
            return result

        invalidate_dashboard(context.organization_id)
        # Joined names (doctor) follow the stored row
        self.db.refresh(appointment)
        return MoveResult(appointment=to_agenda_appointment(appointment), changed=True)

    # ------------------------------------------------------------------
    # Schedule configs
    # ------------------------------------------------------------------

    def list_schedule_configs(self, context: TenantContext, doctor_id: Optional[str] = None) -> list[ScheduleConfig]:
        unit = require_unit(context)
        return self.repo.get_schedule_configs(self.db, unit.id, doctor_id)

    def create_schedule_config(self, data: ScheduleConfigCreate, context: TenantContext) -> ScheduleConfig:
        unit = require_unit(context)
        self._get_scoped(Doctor, data.doctorId, context, "Doctor")
        return self._commit_or_fail(
            "save schedule configuration",
            self.repo.create_schedule_config,
            self.db,
            doctor_id=data.doctorId,
            unit_id=unit.id,
            weekday=data.weekday,
            start_time=data.startTime,
            end_time=data.endTime,
            visit_duration=data.visitDuration,
        )

    def delete_schedule_config(self, config_id: str, context: TenantContext) -> dict:
        unit = require_unit(context)
        config = self.repo.get_schedule_config(self.db, config_id, unit.id)
        if not config:
            raise HTTPException(status_code=404, detail="Schedule configuration not found")
        self._commit_or_fail("delete schedule configuration", self.repo.delete, self.db, config)
        return {"message": "Schedule configuration deleted"}

    # ------------------------------------------------------------------
    # Schedule blocks
    # ------------------------------------------------------------------

    def list_blocks(self, context: TenantContext, range_start: datetime, range_end: datetime) -> list[ScheduleBlock]:
        unit = require_unit(context)
        return self.repo.get_blocks(self.db, context.organization_id, unit.id, range_start, range_end)

    def create_block(self, data: ScheduleBlockCreate, context: TenantContext) -> ScheduleBlock:
        unit = require_unit(context)
        if data.doctorId:
            self._get_scoped(Doctor, data.doctorId, context, "Doctor")
        return self._commit_or_fail(
            "save schedule block",
            self.repo.create_block,
            self.db,
            organization_id=context.organization_id,
            unit_id=unit.id,
            doctor_id=data.doctorId,
            start_at=data.startAt,
            end_at=data.endAt,
            reason=data.reason,
        )

    def delete_block(self, block_id: str, context: TenantContext) -> dict:
        block = self.repo.get_block(self.db, block_id, context.organization_id)
        if not block:
            raise HTTPException(status_code=404, detail="Schedule block not found")
        self._commit_or_fail("delete schedule block", self.repo.delete, self.db, block)
        return {"message": "Schedule block deleted"}
