"""Tests for the agenda day grid."""

from datetime import date, datetime

from clinic_agenda.domain.scheduling.agenda import AgendaBlock, build_agenda_day
from clinic_agenda.domain.scheduling.reschedule import AgendaAppointment

DAY = date(2030, 1, 7)


def at(hour, minute=0):
    return datetime(2030, 1, 7, hour, minute)


def test_grid_places_appointments_and_blocks():
    appointments = [
        AgendaAppointment(id="A", doctor_id="X", patient_id="P", start_at=at(9), end_at=at(9, 15)),
        AgendaAppointment(id="B", doctor_id="Y", patient_id="Q", start_at=at(9), end_at=at(9, 30)),
    ]
    blocks = [AgendaBlock(id="lunch", doctor_id=None, start_at=at(12), end_at=at(13))]

    grid = build_agenda_day("08:00", "18:00", 15, DAY, appointments, blocks, now=datetime(2030, 1, 1))
    by_start = {slot.start: slot for slot in grid}

    assert len(grid) == 40
    assert [a.id for a in by_start[at(9)].appointments] == ["A", "B"]
    assert [a.id for a in by_start[at(9, 15)].appointments] == ["B"]
    assert by_start[at(9, 30)].is_free
    assert [b.id for b in by_start[at(12, 45)].blocks] == ["lunch"]
    assert by_start[at(13)].blocks == []


def test_grid_for_one_doctor():
    appointments = [
        AgendaAppointment(id="A", doctor_id="X", patient_id="P", start_at=at(9), end_at=at(9, 15)),
        AgendaAppointment(id="B", doctor_id="Y", patient_id="Q", start_at=at(9), end_at=at(9, 15)),
    ]
    grid = build_agenda_day("08:00", "18:00", 15, DAY, appointments, doctor_id="Y", now=datetime(2030, 1, 1))
    assert [a.id for a in grid[4].appointments] == ["B"]


def test_past_slots_are_flagged():
    grid = build_agenda_day("08:00", "10:00", 60, DAY, [], now=at(9, 30))
    assert [slot.is_past for slot in grid] == [True, True]
    grid = build_agenda_day("08:00", "10:00", 60, DAY, [], now=at(8, 30))
    assert [slot.is_past for slot in grid] == [True, False]


def test_slot_end_follows_duration():
    grid = build_agenda_day("08:00", "09:00", 20, DAY, [], now=at(0))
    assert [(s.start, s.end) for s in grid] == [
        (at(8), at(8, 20)),
        (at(8, 20), at(8, 40)),
        (at(8, 40), at(9)),
    ]
