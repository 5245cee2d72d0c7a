"""Agenda day grid: slots of a unit with the appointments and blocks that fall in each."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from .overlap import appointments_in_slot, blocks_in_slot
from .reschedule import AgendaAppointment
from .slots import DEFAULT_VISIT_DURATION, slots_for_unit


@dataclass
class AgendaBlock:
    id: str
    doctor_id: Optional[str]
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None


@dataclass
class AgendaSlot:
    start: datetime
    end: datetime
    is_past: bool
    appointments: List[AgendaAppointment] = field(default_factory=list)
    blocks: List[AgendaBlock] = field(default_factory=list)

    @property
    def is_free(self) -> bool:
        return not self.appointments and not self.blocks


def build_agenda_day(
    opening: Optional[str],
    closing: Optional[str],
    duration: Optional[int],
    day: date,
    appointments: Sequence[AgendaAppointment],
    blocks: Sequence[AgendaBlock] = (),
    doctor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[AgendaSlot]:
    """Lay out one day of a unit's agenda, optionally for a single doctor."""
    now = now or datetime.now()
    step = timedelta(minutes=duration or DEFAULT_VISIT_DURATION)

    grid = []
    for start in slots_for_unit(opening, closing, duration, day):
        end = start + step
        grid.append(
            AgendaSlot(
                start=start,
                end=end,
                is_past=start < now,
                appointments=appointments_in_slot(start, end, doctor_id, appointments),
                blocks=blocks_in_slot(start, end, doctor_id, blocks),
            )
        )
    return grid
