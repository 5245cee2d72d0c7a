"""Tests for agenda slot generation."""

from datetime import date, datetime, time

import pytest

from clinic_agenda.domain.scheduling.slots import (
    InvalidSlotConfiguration,
    generate_slots,
    parse_clock_time,
    slots_for_unit,
)

DAY = date(2030, 1, 7)


class TestGenerateSlots:
    def test_business_day_quarter_hours(self):
        slots = generate_slots("08:00", "18:00", 15, DAY)
        assert len(slots) == 40
        assert slots[0] == datetime(2030, 1, 7, 8, 0)
        assert slots[-1] == datetime(2030, 1, 7, 17, 45)

    def test_overnight_schedule_rolls_into_next_day(self):
        slots = generate_slots("22:00", "02:00", 60, DAY)
        assert slots == [
            datetime(2030, 1, 7, 22, 0),
            datetime(2030, 1, 7, 23, 0),
            datetime(2030, 1, 8, 0, 0),
            datetime(2030, 1, 8, 1, 0),
        ]

    def test_same_opening_and_closing_is_empty(self):
        assert generate_slots("09:00", "09:00", 15, DAY) == []

    def test_last_slot_may_run_past_closing(self):
        slots = generate_slots("08:00", "09:00", 25, DAY)
        assert [s.time() for s in slots] == [time(8, 0), time(8, 25), time(8, 50)]

    @pytest.mark.parametrize("duration", [0, -15, None])
    def test_non_positive_duration_raises(self, duration):
        with pytest.raises(InvalidSlotConfiguration):
            generate_slots("08:00", "18:00", duration, DAY)

    def test_accepts_datetime_as_day(self):
        slots = generate_slots("08:00", "08:30", 15, datetime(2030, 1, 7, 13, 45))
        assert slots == [datetime(2030, 1, 7, 8, 0), datetime(2030, 1, 7, 8, 15)]

    def test_slots_are_strictly_increasing_and_evenly_spaced(self):
        slots = generate_slots("07:10", "12:40", 20, DAY)
        gaps = {(b - a).seconds for a, b in zip(slots, slots[1:])}
        assert gaps == {20 * 60}


class TestUnitDefaults:
    def test_unset_unit_fields_use_defaults(self):
        slots = slots_for_unit(None, None, None, DAY)
        assert len(slots) == 40
        assert slots[0].time() == time(8, 0)

    def test_unit_values_win_over_defaults(self):
        slots = slots_for_unit("13:00", "14:00", 30, DAY)
        assert [s.time() for s in slots] == [time(13, 0), time(13, 30)]


class TestParseClockTime:
    def test_seconds_are_accepted(self):
        assert parse_clock_time("07:30:00") == time(7, 30)

    def test_time_passes_through(self):
        assert parse_clock_time(time(6, 15)) == time(6, 15)

    def test_garbage_is_rejected(self):
        with pytest.raises(InvalidSlotConfiguration):
            parse_clock_time("half past eight")
