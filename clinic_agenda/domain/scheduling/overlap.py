"""
Overlap Matching

Finds which appointments belong in an agenda slot. Slots are half-open
intervals ``[slot_start, slot_end)``: an appointment ending exactly at a
slot boundary is not rendered in the following slot.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Protocol


class TimedEntry(Protocol):
    doctor_id: Optional[str]
    start_at: datetime
    end_at: datetime


def overlaps_slot(entry_start: datetime, entry_end: datetime, slot_start: datetime, slot_end: datetime) -> bool:
    """
    Half-open overlap test between an entry and a slot.

    An entry starting inside the slot always matches, which keeps
    zero-length or inverted rows visible in the slot where they begin.
    """
    if slot_start <= entry_start < slot_end:
        return True
    return entry_start < slot_end and entry_end > slot_start


def appointments_in_slot(
    slot_start: datetime,
    slot_end: datetime,
    doctor_id: Optional[str],
    appointments: Iterable[TimedEntry],
) -> List[TimedEntry]:
    """
    Appointments of ``doctor_id`` overlapping ``[slot_start, slot_end)``.

    ``doctor_id=None`` matches every doctor. Input order is preserved.
    """
    return [
        appt
        for appt in appointments
        if (doctor_id is None or appt.doctor_id == doctor_id)
        and overlaps_slot(appt.start_at, appt.end_at, slot_start, slot_end)
    ]


def blocks_in_slot(
    slot_start: datetime,
    slot_end: datetime,
    doctor_id: Optional[str],
    blocks: Iterable[TimedEntry],
) -> List[TimedEntry]:
    """Schedule blocks covering the slot. Unit-wide blocks (doctor_id None) match any doctor."""
    return [
        block
        for block in blocks
        if (block.doctor_id is None or doctor_id is None or block.doctor_id == doctor_id)
        and overlaps_slot(block.start_at, block.end_at, slot_start, slot_end)
    ]
