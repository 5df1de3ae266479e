"""Constants for timetable generation."""

import re

from ..exceptions import InvalidTimeSlotError

# Days of the teaching week, in display order
DEFAULT_WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

# Time slots definition
# Each slot is 50 minutes with a 10 minute break
DEFAULT_TIME_SLOTS = [
    "09:00-09:50",
    "10:00-10:50",
    "11:00-11:50",
    "12:00-12:50",
    "13:00-13:50",
    "14:00-14:50",
    "15:00-15:50",
    "16:00-16:50",
]

# Separator between start and end in a time slot label
TIME_SLOT_SEPARATOR = "-"

# Wall-clock time inside a slot label
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")

# Credit thresholds -> number of slots per week
# credits >= 4 -> 3 slots, credits >= 3 -> 2 slots, otherwise 1 slot
CREDIT_SLOT_THRESHOLDS = [
    (4, 3),
    (3, 2),
]
MIN_SLOTS_PER_COURSE = 1

# Maximum block feasibility checks per course in the contiguous phase
DEFAULT_MAX_ATTEMPTS = 10_000

# Placeholder id for rows that are not persisted yet
UNSAVED_ROW_ID = 0

# Student-level conflicts require enrollment data that is not modeled
STUDENT_CONFLICTS_NOTE = (
    "Student conflicts are not detected: enrollment data is not available, "
    "so this list is always empty."
)


def parse_time_slot(label: str) -> tuple[str, str]:
    """Split a time slot label into its start and end times.

    The label is split on '-' and both halves are trimmed, so
    "09:00 - 09:50" and "09:00-09:50" are equivalent.

    Args:
        label: Time slot label like "09:00-09:50"

    Returns:
        Tuple of (start, end) in HH:MM format

    Raises:
        InvalidTimeSlotError: If the label is not "HH:MM-HH:MM" or ends before it starts
    """
    parts = str(label).split(TIME_SLOT_SEPARATOR)
    if len(parts) != 2:
        raise InvalidTimeSlotError(label)

    start, end = parts[0].strip(), parts[1].strip()
    start_minutes = time_to_minutes(start, label)
    end_minutes = time_to_minutes(end, label)
    if end_minutes <= start_minutes:
        raise InvalidTimeSlotError(label, f"end {end} is not after start {start}")

    return start, end


def time_to_minutes(value: str, label: str | None = None) -> int:
    """Convert an HH:MM time to minutes since midnight.

    Args:
        value: Time string like "09:50"
        label: Enclosing slot label, used in the error message

    Returns:
        Minutes since midnight

    Raises:
        InvalidTimeSlotError: If the value is not a valid HH:MM time
    """
    match = TIME_PATTERN.fullmatch(value.strip())
    if not match:
        raise InvalidTimeSlotError(label or value)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeSlotError(label or value, f"'{value}' is out of range")
    return hours * 60 + minutes
