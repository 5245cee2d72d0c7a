"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import to_clinic_time, validate_clock_time

AppointmentStatus = Literal["scheduled", "confirmed", "cancelled", "completed", "no_show"]


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment in the current unit"""

    doctorId: str
    patientId: str
    startAt: datetime
    appointmentTypeId: Optional[str] = None
    insurerId: Optional[str] = None
    insurancePlanId: Optional[str] = None
    status: AppointmentStatus = "scheduled"
    notes: Optional[str] = None
    fitIn: bool = False

    @field_validator("startAt")
    @classmethod
    def normalize_start(cls, v):
        return to_clinic_time(v)


class AppointmentUpdate(BaseModel):
    """Schema for editing an appointment; end is recomputed when start changes"""

    doctorId: Optional[str] = None
    patientId: Optional[str] = None
    startAt: Optional[datetime] = None
    appointmentTypeId: Optional[str] = None
    insurerId: Optional[str] = None
    insurancePlanId: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    fitIn: Optional[bool] = None

    @field_validator("startAt")
    @classmethod
    def normalize_start(cls, v):
        return to_clinic_time(v)


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentMoveRequest(BaseModel):
    """Drop target of a drag-and-drop reschedule"""

    targetStart: datetime
    targetDoctorId: str

    @field_validator("targetStart")
    @classmethod
    def normalize_target(cls, v):
        return to_clinic_time(v)


class AppointmentResponse(BaseModel):
    id: str
    unitId: Optional[str] = None
    doctorId: str
    doctorName: Optional[str] = None
    patientId: str
    patientName: Optional[str] = None
    patientPhone: Optional[str] = None
    appointmentTypeId: Optional[str] = None
    appointmentTypeName: Optional[str] = None
    insurerId: Optional[str] = None
    insurerName: Optional[str] = None
    insurancePlanId: Optional[str] = None
    insurancePlanName: Optional[str] = None
    startAt: datetime
    endAt: datetime
    status: str
    notes: Optional[str] = None
    fitIn: bool = False
    bookedById: Optional[str] = None


class AgendaEntryResponse(BaseModel):
    id: str
    doctorId: str
    doctorName: Optional[str] = None
    patientId: str
    patientName: Optional[str] = None
    patientPhone: Optional[str] = None
    appointmentTypeName: Optional[str] = None
    startAt: datetime
    endAt: datetime
    status: str
    fitIn: bool = False


class MoveResponse(BaseModel):
    changed: bool
    appointment: AgendaEntryResponse


class ScheduleBlockCreate(BaseModel):
    doctorId: Optional[str] = None  # None blocks the whole unit
    startAt: datetime
    endAt: datetime
    reason: Optional[str] = None

    @field_validator("startAt", "endAt")
    @classmethod
    def normalize_bounds(cls, v):
        return to_clinic_time(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.endAt <= self.startAt:
            raise ValueError("Block end must be after its start")
        return self


class ScheduleBlockResponse(BaseModel):
    id: str
    unitId: str
    doctorId: Optional[str] = None
    startAt: datetime
    endAt: datetime
    reason: Optional[str] = None


class AgendaSlotResponse(BaseModel):
    start: datetime
    end: datetime
    isPast: bool
    isFree: bool
    appointments: list[AgendaEntryResponse]
    blocks: list[ScheduleBlockResponse]


class AgendaDayResponse(BaseModel):
    date: date
    unitId: str
    doctorId: Optional[str] = None
    slotMinutes: int
    slots: list[AgendaSlotResponse]


class ScheduleConfigCreate(BaseModel):
    doctorId: str
    weekday: int = Field(ge=0, le=6)  # 0 = Monday
    startTime: str
    endTime: str
    visitDuration: int = Field(ge=1)

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        v = validate_clock_time(v)
        if v is None:
            raise ValueError("Time is required")
        return v


class ScheduleConfigResponse(BaseModel):
    id: str
    doctorId: str
    unitId: str
    weekday: int
    startTime: str
    endTime: str
    visitDuration: int
