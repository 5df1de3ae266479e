"""Utility functions for timetable generation."""

from collections.abc import Iterable

from .constants import CREDIT_SLOT_THRESHOLDS, MIN_SLOTS_PER_COURSE
from .constraints import ConstraintIndex
from .models import Classroom, Course, TimeGrid


def slots_needed(credits: float) -> int:
    """Number of weekly slots a course needs for its credit count.

    - credits >= 4 -> 3 slots
    - credits >= 3 -> 2 slots
    - otherwise    -> 1 slot

    Args:
        credits: Course credits (may be fractional)

    Returns:
        Slot count between 1 and 3
    """
    for min_credits, slots in CREDIT_SLOT_THRESHOLDS:
        if credits >= min_credits:
            return slots
    return MIN_SLOTS_PER_COURSE


def sort_courses_by_priority(
    courses: Iterable[Course], index: ConstraintIndex
) -> list[Course]:
    """Sort courses most-constrained first.

    Score = number of conflicting courses + number of cells the course's
    instructor is unavailable in. Higher scores are placed first so that easy
    courses don't take the slots the hard ones needed. Equal scores keep their
    input order.

    Args:
        courses: Courses to order
        index: Constraint lookups

    Returns:
        New list sorted by descending score
    """
    return sorted(courses, key=lambda c: -index.score(c))


def find_candidate_rooms(course: Course, classrooms: Iterable[Classroom]) -> list[Classroom]:
    """Classrooms large enough for the course, smallest first.

    Args:
        course: Course to seat
        classrooms: All classrooms

    Returns:
        Rooms with capacity >= course capacity, ascending by capacity
    """
    return sorted(
        (room for room in classrooms if room.capacity >= course.capacity),
        key=lambda r: r.capacity,
    )


def valid_block_starts(grid: TimeGrid, length: int) -> list[int]:
    """Start indices where a block of `length` slots fits inside one day."""
    return list(range(grid.slot_count - length + 1))


def collect_reference_warnings(
    courses: list[Course],
    instructor_ids: set[int],
    classroom_ids: set[int],
    index: ConstraintIndex,
    grid: TimeGrid,
) -> list[str]:
    """Find references to unknown entities or cells outside the grid.

    These never stop generation; an unknown id simply never matches anything.

    Returns:
        Human-readable warning messages
    """
    warnings: list[str] = []
    course_ids = {c.id for c in courses}

    if instructor_ids:
        for course in courses:
            if course.instructor_id not in instructor_ids:
                warnings.append(
                    f"Course {course.code} references unknown instructor {course.instructor_id}"
                )
        for instructor_id in sorted(index.instructor_ids - instructor_ids):
            warnings.append(f"Constraint references unknown instructor {instructor_id}")

    for classroom_id in sorted(index.classroom_ids - classroom_ids):
        warnings.append(f"Constraint references unknown classroom {classroom_id}")

    for course_id in sorted(index.course_ids - course_ids):
        warnings.append(f"Course conflict references unknown course {course_id}")

    days = set(grid.days)
    labels = set(grid.time_slots)
    for day, label in sorted(index.unavailable_cells()):
        if day not in days or label not in labels:
            warnings.append(f"Unavailability for {day} {label} is outside the weekly grid")

    return warnings
