"""
Drag-and-drop rescheduling

The agenda board holds the appointments loaded for one day. Moving an
appointment applies the new start/end/doctor to the board first, then asks
the store to persist it; if the store rejects the write the board is put
back exactly as it was.
"""

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class AgendaAppointment:
    """Typed appointment as seen by the agenda (joins already resolved)."""

    id: str
    doctor_id: str
    patient_id: str
    start_at: datetime
    end_at: datetime
    status: str = "scheduled"
    fit_in: bool = False
    notes: Optional[str] = None
    patient_name: Optional[str] = None
    patient_phone: Optional[str] = None
    doctor_name: Optional[str] = None
    appointment_type_name: Optional[str] = None
    insurer_name: Optional[str] = None
    insurance_plan_name: Optional[str] = None

    @property
    def duration(self):
        return self.end_at - self.start_at


class AppointmentStore(Protocol):
    def update_appointment(
        self, appointment_id: str, start_at: datetime, end_at: datetime, doctor_id: str
    ) -> None: ...


class AppointmentNotOnBoard(LookupError):
    """The appointment is not part of the loaded agenda"""


class RescheduleFailed(Exception):
    """The store rejected a move; the board has been reverted"""

    def __init__(self, appointment_id: str, reason: str):
        super().__init__(f"Could not move appointment {appointment_id}: {reason}")
        self.appointment_id = appointment_id
        self.reason = reason


@dataclass
class MoveResult:
    appointment: AgendaAppointment
    changed: bool


class AgendaBoard:
    """In-memory state of one agenda day."""

    def __init__(self, appointments: Iterable[AgendaAppointment] = ()):
        self._appointments: Dict[str, AgendaAppointment] = {a.id: a for a in appointments}

    @property
    def appointments(self) -> List[AgendaAppointment]:
        return list(self._appointments.values())

    def get(self, appointment_id: str) -> AgendaAppointment:
        try:
            return self._appointments[appointment_id]
        except KeyError:
            raise AppointmentNotOnBoard(appointment_id) from None

    def move(
        self,
        appointment_id: str,
        target_start: datetime,
        target_doctor_id: str,
        store: AppointmentStore,
    ) -> MoveResult:
        """
        Move an appointment to another slot and/or doctor.

        The original duration is kept. Dropping on the same start and doctor
        is a no-op and issues no write.
        """
        current = self.get(appointment_id)
        if current.start_at == target_start and current.doctor_id == target_doctor_id:
            return MoveResult(appointment=current, changed=False)

        snapshot = replace(current)
        new_end = target_start + current.duration

        current.start_at = target_start
        current.end_at = new_end
        current.doctor_id = target_doctor_id

        try:
            store.update_appointment(appointment_id, target_start, new_end, target_doctor_id)
        except Exception as e:
            for f in fields(current):
                setattr(current, f.name, getattr(snapshot, f.name))
            logger.warning(f"↩️ Move of appointment {appointment_id} reverted: {e}")
            raise RescheduleFailed(appointment_id, str(e)) from e

        logger.info(
            f"✅ Appointment {appointment_id} moved to {target_start.isoformat()} (doctor {target_doctor_id})"
        )
        return MoveResult(appointment=current, changed=True)
