"""
Wall-clock arithmetic shared by the allocator.

Times travel as zero-padded "HH:MM" strings and are compared as minutes since
midnight.
"""

from datetime import datetime
from typing import List, Optional

from models.schemas import TimetableSettings
from config import settings as app_settings

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


def to_minutes(time_str: str) -> int:
    """Parse an HH:MM string into minutes since midnight."""
    parsed = datetime.strptime(time_str, "%H:%M")
    return parsed.hour * 60 + parsed.minute


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as a zero-padded HH:MM string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(time_str: str, minutes: int) -> str:
    return format_minutes(to_minutes(time_str) + minutes)


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Check if two half-open [start, end) intervals overlap."""
    return start1 < end2 and start2 < end1


def is_valid_slot(start_time: str, duration: int, settings: TimetableSettings) -> bool:
    """
    A slot is valid when it fits inside the day and stays clear of lunch.

    Touching the lunch window (ending exactly at lunch start or starting at
    lunch end) is allowed.
    """
    slot_start = to_minutes(start_time)
    slot_end = slot_start + duration

    day_start = to_minutes(settings.day_start_time)
    day_end = to_minutes(settings.day_end_time)
    if slot_start < day_start or slot_end > day_end:
        return False

    lunch_start = to_minutes(settings.lunch_start_time)
    lunch_end = to_minutes(settings.lunch_end_time)
    if not (slot_end <= lunch_start or slot_start >= lunch_end):
        return False

    return True


def candidate_start_times(settings: TimetableSettings, duration: int,
                          step: Optional[int] = None) -> List[str]:
    """
    List valid start times for a lecture of the given duration.

    Starts are laid on a fixed grid anchored at the day start, up to
    ``dayEnd - duration`` inclusive, in ascending order.
    """
    step = step or app_settings.slot_granularity_minutes
    day_start = to_minutes(settings.day_start_time)
    day_end = to_minutes(settings.day_end_time)

    slots = []
    for minutes in range(day_start, day_end - duration + 1, step):
        start_time = format_minutes(minutes)
        if is_valid_slot(start_time, duration, settings):
            slots.append(start_time)
    return slots
