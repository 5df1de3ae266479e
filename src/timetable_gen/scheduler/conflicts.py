"""Occupancy tracking and slot feasibility checks for timetable generation."""

from collections import defaultdict

from .constraints import ConstraintIndex
from .models import Course, Slot, TimeGrid, UnavailabilityReason


class OccupancyMaps:
    """Run-local record of which grid cells are already taken.

    This class maintains three separate maps to detect and prevent conflicts:
    - instructor_slots: Which cells each instructor already teaches in
    - classroom_slots: Which cells each classroom is already booked for
    - course_slots: Which cells each course already occupies

    A fresh instance is created for every generation run and discarded at the
    end of it.
    """

    def __init__(self) -> None:
        # instructor id -> set of occupied slots
        self.instructor_slots: dict[int, set[Slot]] = defaultdict(set)
        # classroom id -> set of occupied slots
        self.classroom_slots: dict[int, set[Slot]] = defaultdict(set)
        # course id -> set of occupied slots
        self.course_slots: dict[int, set[Slot]] = defaultdict(set)

    def reserve(self, course: Course, classroom_id: int, slot: Slot) -> None:
        """Reserve a slot for a course, its instructor and a classroom.

        Args:
            course: Course being placed
            classroom_id: Classroom hosting the course
            slot: Grid cell to reserve
        """
        self.instructor_slots[course.instructor_id].add(slot)
        self.classroom_slots[classroom_id].add(slot)
        self.course_slots[course.id].add(slot)

    def is_instructor_busy(self, instructor_id: int, slot: Slot) -> bool:
        slots = self.instructor_slots.get(instructor_id)
        return bool(slots) and slot in slots

    def is_room_busy(self, classroom_id: int, slot: Slot) -> bool:
        slots = self.classroom_slots.get(classroom_id)
        return bool(slots) and slot in slots

    def is_course_at(self, course_id: int, slot: Slot) -> bool:
        slots = self.course_slots.get(course_id)
        return bool(slots) and slot in slots

    def slots_of_course(self, course_id: int) -> set[Slot]:
        """Slots a course occupies so far."""
        return set(self.course_slots.get(course_id, ()))


def check_feasibility(
    course: Course,
    slot: Slot,
    classroom_id: int,
    index: ConstraintIndex,
    occupancy: OccupancyMaps,
    grid: TimeGrid,
) -> tuple[bool, UnavailabilityReason | None]:
    """Check whether a course can be placed in a slot and classroom.

    Checks run in order and stop at the first failure:
    1. Instructor unavailability constraint
    2. Instructor already teaching in the slot
    3. Room unavailability constraint
    4. Room already booked in the slot
    5. A conflicting course already in the slot

    Args:
        course: Course to place
        slot: Candidate grid cell
        classroom_id: Candidate classroom
        index: Constraint lookups
        occupancy: Current occupancy of the run
        grid: Weekly grid, used to map the slot index to its label

    Returns:
        Tuple of (feasible, reason); reason is None when feasible
    """
    label = grid.label(slot.index)

    if index.is_instructor_unavailable(course.instructor_id, slot.day, label):
        return (False, UnavailabilityReason.INSTRUCTOR_UNAVAILABLE)
    if occupancy.is_instructor_busy(course.instructor_id, slot):
        return (False, UnavailabilityReason.INSTRUCTOR_BUSY)
    if index.is_room_unavailable(classroom_id, slot.day, label):
        return (False, UnavailabilityReason.ROOM_UNAVAILABLE)
    if occupancy.is_room_busy(classroom_id, slot):
        return (False, UnavailabilityReason.ROOM_BUSY)

    for other_id in index.conflicts_of(course.id):
        if occupancy.is_course_at(other_id, slot):
            return (False, UnavailabilityReason.COURSE_CONFLICT)

    return (True, None)


def is_feasible(
    course: Course,
    slot: Slot,
    classroom_id: int,
    index: ConstraintIndex,
    occupancy: OccupancyMaps,
    grid: TimeGrid,
) -> bool:
    """Return True if the course can go into the slot and classroom."""
    feasible, _ = check_feasibility(course, slot, classroom_id, index, occupancy, grid)
    return feasible


def is_block_feasible(
    course: Course,
    day: str,
    start: int,
    length: int,
    classroom_id: int,
    index: ConstraintIndex,
    occupancy: OccupancyMaps,
    grid: TimeGrid,
) -> bool:
    """Check `length` consecutive slots starting at `start` on one day.

    Returns:
        True only if every slot in the block is feasible and the block fits
        inside the day
    """
    if start < 0 or start + length > grid.slot_count:
        return False

    return all(
        is_feasible(course, Slot(day, start + offset), classroom_id, index, occupancy, grid)
        for offset in range(length)
    )
