"""Scheduling router - FastAPI endpoints for the agenda, appointments and schedule settings"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from ...models import Appointment, ScheduleBlock, ScheduleConfig
from ...shared.validators import to_clinic_time
from .reschedule import AgendaAppointment
from .schemas import (
    AgendaDayResponse,
    AgendaEntryResponse,
    AgendaSlotResponse,
    AppointmentCreate,
    AppointmentMoveRequest,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    MoveResponse,
    ScheduleBlockCreate,
    ScheduleBlockResponse,
    ScheduleConfigCreate,
    ScheduleConfigResponse,
)
from .service import SchedulingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def _appointment_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        unitId=a.unit_id,
        doctorId=a.doctor_id,
        doctorName=a.doctor.name if a.doctor else None,
        patientId=a.patient_id,
        patientName=a.patient.name if a.patient else None,
        patientPhone=a.patient.phone if a.patient else None,
        appointmentTypeId=a.appointment_type_id,
        appointmentTypeName=a.appointment_type.name if a.appointment_type else None,
        insurerId=a.insurer_id,
        insurerName=a.insurer.name if a.insurer else None,
        insurancePlanId=a.insurance_plan_id,
        insurancePlanName=a.insurance_plan.name if a.insurance_plan else None,
        startAt=a.start_at,
        endAt=a.end_at,
        status=a.status,
        notes=a.notes,
        fitIn=bool(a.fit_in),
        bookedById=a.booked_by_id,
    )


def _entry_response(a: AgendaAppointment) -> AgendaEntryResponse:
    return AgendaEntryResponse(
        id=a.id,
        doctorId=a.doctor_id,
        doctorName=a.doctor_name,
        patientId=a.patient_id,
        patientName=a.patient_name,
        patientPhone=a.patient_phone,
        appointmentTypeName=a.appointment_type_name,
        startAt=a.start_at,
        endAt=a.end_at,
        status=a.status,
        fitIn=a.fit_in,
    )


def _block_response(b: ScheduleBlock, unit_id: Optional[str] = None) -> ScheduleBlockResponse:
    return ScheduleBlockResponse(
        id=b.id,
        unitId=unit_id or b.unit_id,
        doctorId=b.doctor_id,
        startAt=b.start_at,
        endAt=b.end_at,
        reason=b.reason,
    )


def _config_response(c: ScheduleConfig) -> ScheduleConfigResponse:
    return ScheduleConfigResponse(
        id=c.id,
        doctorId=c.doctor_id,
        unitId=c.unit_id,
        weekday=c.weekday,
        startTime=c.start_time,
        endTime=c.end_time,
        visitDuration=c.visit_duration,
    )


# ============================================================================
# AGENDA
# ============================================================================


@router.get("/agenda", response_model=AgendaDayResponse)
async def get_agenda_day(
    day: date = Query(..., alias="date"),
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Day grid of the current unit, optionally for one doctor"""
    unit, grid = service.get_agenda_day(context, day, doctor_id)
    return AgendaDayResponse(
        date=day,
        unitId=unit.id,
        doctorId=doctor_id,
        slotMinutes=(grid[0].end - grid[0].start).seconds // 60 if grid else unit.visit_duration,
        slots=[
            AgendaSlotResponse(
                start=slot.start,
                end=slot.end,
                isPast=slot.is_past,
                isFree=slot.is_free,
                appointments=[_entry_response(a) for a in slot.appointments],
                blocks=[_block_response(b, unit.id) for b in slot.blocks],
            )
            for slot in grid
        ],
    )


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments(
    start: datetime = Query(...),
    end: datetime = Query(...),
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Appointments of the current unit inside [start, end]"""
    appointments = service.list_appointments(
        context, to_clinic_time(start), to_clinic_time(end), doctor_id
    )
    return [_appointment_response(a) for a in appointments]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return _appointment_response(service.get_appointment(appointment_id, context))


@router.post("/appointments", response_model=AppointmentResponse)
async def create_appointment(
    data: AppointmentCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book an appointment in the current unit"""
    return _appointment_response(service.create_appointment(data, context))


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return _appointment_response(service.update_appointment(appointment_id, data, context))


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Status selector (scheduled, confirmed, cancelled, completed, no_show)"""
    return _appointment_response(service.update_status(appointment_id, data.status, context))


@router.post("/appointments/{appointment_id}/move", response_model=MoveResponse)
async def move_appointment(
    appointment_id: str,
    data: AppointmentMoveRequest,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Drag-and-drop reschedule to another slot and/or doctor"""
    result = service.move_appointment(appointment_id, data, context)
    return MoveResponse(changed=result.changed, appointment=_entry_response(result.appointment))


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_appointment(appointment_id, context)


# ============================================================================
# SCHEDULE CONFIGS & BLOCKS
# ============================================================================


@router.get("/schedule-configs", response_model=list[ScheduleConfigResponse])
async def list_schedule_configs(
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Weekday working hours of doctors in the current unit"""
    return [_config_response(c) for c in service.list_schedule_configs(context, doctor_id)]


@router.post("/schedule-configs", response_model=ScheduleConfigResponse)
async def create_schedule_config(
    data: ScheduleConfigCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return _config_response(service.create_schedule_config(data, context))


@router.delete("/schedule-configs/{config_id}")
async def delete_schedule_config(
    config_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_schedule_config(config_id, context)


@router.get("/schedule-blocks", response_model=list[ScheduleBlockResponse])
async def list_schedule_blocks(
    start: datetime = Query(...),
    end: datetime = Query(...),
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Unit-wide and doctor blocks intersecting [start, end]"""
    blocks = service.list_blocks(context, to_clinic_time(start), to_clinic_time(end))
    return [_block_response(b) for b in blocks]


@router.post("/schedule-blocks", response_model=ScheduleBlockResponse)
async def create_schedule_block(
    data: ScheduleBlockCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return _block_response(service.create_block(data, context))


@router.delete("/schedule-blocks/{block_id}")
async def delete_schedule_block(
    block_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_block(block_id, context)
