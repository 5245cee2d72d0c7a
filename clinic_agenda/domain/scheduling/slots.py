"""
Slot Generation

Generates the discrete time slots of a unit's agenda grid for one day.
Slots are derived from the unit's opening time, closing time and visit
duration; they are never persisted.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional, Union

DEFAULT_OPENING_TIME = "08:00"
DEFAULT_CLOSING_TIME = "18:00"
DEFAULT_VISIT_DURATION = 15

TimeLike = Union[str, time]


class InvalidSlotConfiguration(ValueError):
    """Raised when opening/closing time or duration cannot produce a slot sequence"""


def parse_clock_time(value: TimeLike) -> time:
    """
    Parse an ``HH:MM`` (or ``HH:MM:SS``) string into a ``time``.

    ``time`` instances are returned unchanged.
    """
    if isinstance(value, time):
        return value

    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except (ValueError, AttributeError):
            continue
    raise InvalidSlotConfiguration(f"Invalid time of day: {value!r} (expected HH:MM)")


def generate_slots(
    opening: TimeLike,
    closing: TimeLike,
    duration: int,
    day: Union[date, datetime],
) -> List[datetime]:
    """
    Generate slot start datetimes for ``day``.

    Args:
        opening: opening time (HH:MM)
        closing: closing time (HH:MM); when it precedes ``opening`` it is
            taken as the next day (overnight schedule)
        duration: visit duration in minutes, must be >= 1
        day: reference date

    Returns:
        list[datetime]: starts stepping by ``duration`` from opening up to,
        but not including, closing. Empty when opening == closing.

    Raises:
        InvalidSlotConfiguration: duration < 1 or unparseable times
    """
    if duration is None or int(duration) < 1:
        raise InvalidSlotConfiguration(f"Visit duration must be at least 1 minute, got {duration!r}")

    if isinstance(day, datetime):
        day = day.date()

    start = datetime.combine(day, parse_clock_time(opening))
    end = datetime.combine(day, parse_clock_time(closing))
    if end < start:
        end += timedelta(days=1)

    step = timedelta(minutes=int(duration))
    slots = []
    current = start
    while current < end:
        slots.append(current)
        current += step
    return slots


def slots_for_unit(
    opening: Optional[str],
    closing: Optional[str],
    duration: Optional[int],
    day: Union[date, datetime],
) -> List[datetime]:
    """Same as generate_slots, falling back to defaults for unset unit fields."""
    return generate_slots(
        opening or DEFAULT_OPENING_TIME,
        closing or DEFAULT_CLOSING_TIME,
        duration or DEFAULT_VISIT_DURATION,
        day,
    )
