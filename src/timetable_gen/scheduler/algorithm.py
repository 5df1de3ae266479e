"""Slot allocation algorithm for weekly timetable generation."""

import logging
import random
import time
from collections import defaultdict
from collections.abc import Iterable, Iterator
from typing import Any

from .conflicts import OccupancyMaps, is_block_feasible, is_feasible
from .constants import DEFAULT_MAX_ATTEMPTS
from .constraints import ConstraintIndex
from .models import (
    Classroom,
    Constraint,
    Course,
    Instructor,
    PlacementKind,
    ScheduledClass,
    ScheduleResult,
    ScheduleStatistics,
    Slot,
    TimeGrid,
    UnderScheduledCourse,
    UnscheduledReason,
)
from .utils import (
    collect_reference_warnings,
    find_candidate_rooms,
    slots_needed,
    sort_courses_by_priority,
    valid_block_starts,
)

logger = logging.getLogger(__name__)


def _coerce(items: Iterable[Any], model: type) -> list:
    """Accept model instances or dictionaries."""
    return [item if isinstance(item, model) else model.from_dict(item) for item in items]


class _SearchBudget:
    """Attempt counter for one course plus an optional run-wide deadline."""

    def __init__(self, max_attempts: int, deadline: float | None) -> None:
        self.max_attempts = max_attempts
        self.deadline = deadline
        self.attempts = 0
        self.exceeded = False

    def spend(self) -> bool:
        """Consume one attempt; False once the budget is gone."""
        if self.attempts >= self.max_attempts or (
            self.deadline is not None and time.monotonic() >= self.deadline
        ):
            self.exceeded = True
            return False
        self.attempts += 1
        return True


class TimetableGenerator:
    """Greedy, randomized slot allocator for a fixed weekly grid.

    Strategy for each course (most constrained first):
    1. Slot count from credits: >= 4 -> 3 slots, >= 3 -> 2 slots, else 1
    2. Candidate rooms: capacity >= course capacity, smallest first
    3. Contiguous phase: one block of consecutive slots on one day, trying
       rooms in order, days and start positions in random order
    4. Scattered fallback: single slots anywhere in the week, cells in random
       order, until the slot count is reached or the grid is exhausted
    5. Anything short of the slot count is reported as a diagnostic

    All lookup and occupancy state is created per `generate` call. Randomness
    comes only from the injected `random.Random`, so a seeded generator gives
    reproducible output.
    """

    def __init__(
        self,
        grid: TimeGrid | None = None,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        time_limit: float | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            grid: Weekly grid; defaults to Monday-Friday with eight slots
            rng: Randomness source; a private unseeded one when omitted
            max_attempts: Block feasibility checks allowed per course in the
                contiguous phase
            time_limit: Wall-clock seconds for the contiguous phase of the whole
                run, or None for no limit
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        if time_limit is not None and time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")

        self.grid = grid or TimeGrid()
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts
        self.time_limit = time_limit

    def generate(
        self,
        courses: Iterable[Course | dict],
        instructors: Iterable[Instructor | dict],
        classrooms: Iterable[Classroom | dict],
        constraints: Iterable[Constraint | dict],
        timetable_id: int,
    ) -> ScheduleResult:
        """Generate a timetable.

        Args:
            courses: Courses to place
            instructors: Known instructors (used for reference checks only)
            classrooms: Available classrooms
            constraints: Typed constraints or wire records
            timetable_id: Owning timetable id stamped on every row

        Returns:
            ScheduleResult with rows, diagnostics and statistics

        Raises:
            InvalidConstraintError: If a constraint record is malformed; raised
                before any course is placed
        """
        started = time.monotonic()
        deadline = started + self.time_limit if self.time_limit is not None else None

        course_list: list[Course] = _coerce(courses, Course)
        instructor_list: list[Instructor] = _coerce(instructors, Instructor)
        classroom_list: list[Classroom] = _coerce(classrooms, Classroom)

        index = ConstraintIndex.build(constraints)
        occupancy = OccupancyMaps()

        result = ScheduleResult(timetable_id=timetable_id, grid=self.grid)
        result.warnings = collect_reference_warnings(
            course_list,
            {i.id for i in instructor_list},
            {r.id for r in classroom_list},
            index,
            self.grid,
        )
        for warning in result.warnings:
            logger.warning(warning)

        ordered = sort_courses_by_priority(course_list, index)
        logger.info(
            f"Scheduling {len(ordered)} courses into {len(self.grid.days)} days x "
            f"{self.grid.slot_count} slots with {len(classroom_list)} classrooms"
        )

        placements: dict[PlacementKind, int] = defaultdict(int)
        requested_total = 0
        achieved_total = 0

        for course in ordered:
            needed = slots_needed(course.credits)
            requested_total += needed
            budget = _SearchBudget(self.max_attempts, deadline)

            rows, kind = self._schedule_course(
                course, needed, classroom_list, index, occupancy, budget, timetable_id
            )
            result.scheduled_classes.extend(rows)
            placements[kind] += 1
            achieved = len(rows)
            achieved_total += achieved

            if budget.exceeded:
                result.budget_exceeded.append(course.code)
                logger.warning(
                    f"Search budget exceeded for course {course.code} "
                    f"after {budget.attempts} attempts"
                )

            if achieved < needed:
                diagnostic = self._diagnose(course, needed, achieved, classroom_list, budget)
                result.diagnostics.append(diagnostic)
                logger.warning(
                    f"Could only assign {achieved}/{needed} slots for course {course.code}"
                )

        result.statistics = self._compute_statistics(
            result, len(ordered), placements, requested_total, achieved_total
        )
        result.statistics.generation_time_seconds = time.monotonic() - started

        logger.info(
            f"Placed {achieved_total} of {requested_total} slots "
            f"({len(result.diagnostics)} courses under-scheduled)"
        )
        return result

    def _schedule_course(
        self,
        course: Course,
        needed: int,
        classrooms: list[Classroom],
        index: ConstraintIndex,
        occupancy: OccupancyMaps,
        budget: _SearchBudget,
        timetable_id: int,
    ) -> tuple[list[ScheduledClass], PlacementKind]:
        """Place one course, contiguous block first, scattered slots second.

        Returns:
            Tuple of (rows created, how the course was placed)
        """
        rooms = find_candidate_rooms(course, classrooms)
        if not rooms:
            logger.debug(f"No classroom with capacity >= {course.capacity} for {course.code}")
            return ([], PlacementKind.NONE)

        block = self._find_block(course, needed, rooms, index, occupancy, budget)
        if block is not None:
            room, day, start = block
            rows = self._commit_block(course, room, day, start, needed, occupancy, timetable_id)
            logger.debug(
                f"Placed {course.code} in room {room.id} on {day} "
                f"{rows[0].start_time}-{rows[-1].end_time}"
            )
            return (rows, PlacementKind.CONTIGUOUS)

        rows = self._place_scattered(course, needed, rooms, index, occupancy, timetable_id)
        logger.debug(f"Scattered {len(rows)}/{needed} slots for {course.code}")
        return (rows, PlacementKind.SCATTERED if rows else PlacementKind.NONE)

    def _block_candidates(
        self, rooms: list[Classroom], needed: int
    ) -> Iterator[tuple[Classroom, str, int]]:
        """Yield (room, day, start) in search order.

        Days are shuffled once per course; start positions are reshuffled for
        every (room, day) pair.
        """
        days = list(self.grid.days)
        self.rng.shuffle(days)

        for room in rooms:
            for day in days:
                starts = valid_block_starts(self.grid, needed)
                self.rng.shuffle(starts)
                for start in starts:
                    yield (room, day, start)

    def _find_block(
        self,
        course: Course,
        needed: int,
        rooms: list[Classroom],
        index: ConstraintIndex,
        occupancy: OccupancyMaps,
        budget: _SearchBudget,
    ) -> tuple[Classroom, str, int] | None:
        """Find the first feasible contiguous block within the search budget."""
        if needed > self.grid.slot_count:
            return None

        for room, day, start in self._block_candidates(rooms, needed):
            if not budget.spend():
                return None
            if is_block_feasible(
                course, day, start, needed, room.id, index, occupancy, self.grid
            ):
                return (room, day, start)

        return None

    def _commit_block(
        self,
        course: Course,
        room: Classroom,
        day: str,
        start: int,
        needed: int,
        occupancy: OccupancyMaps,
        timetable_id: int,
    ) -> list[ScheduledClass]:
        """Reserve a contiguous block and create its rows.

        One row per slot. Inner rows end where the next slot starts, so the
        rows tile one continuous time range without the breaks in between.
        """
        rows = []
        last = start + needed - 1

        for slot_index in range(start, last + 1):
            occupancy.reserve(course, room.id, Slot(day, slot_index))

            end_time = (
                self.grid.end_time(slot_index)
                if slot_index == last
                else self.grid.start_time(slot_index + 1)
            )
            rows.append(
                ScheduledClass(
                    course_id=course.id,
                    instructor_id=course.instructor_id,
                    classroom_id=room.id,
                    day=day,
                    start_time=self.grid.start_time(slot_index),
                    end_time=end_time,
                    timetable_id=timetable_id,
                )
            )

        return rows

    def _place_scattered(
        self,
        course: Course,
        needed: int,
        rooms: list[Classroom],
        index: ConstraintIndex,
        occupancy: OccupancyMaps,
        timetable_id: int,
    ) -> list[ScheduledClass]:
        """Place single slots anywhere in the week until `needed` are placed."""
        cells = self.grid.cells()
        self.rng.shuffle(cells)
        rows: list[ScheduledClass] = []

        for room in rooms:
            if len(rows) >= needed:
                break

            for slot in cells:
                if len(rows) >= needed:
                    break
                if not is_feasible(course, slot, room.id, index, occupancy, self.grid):
                    continue

                occupancy.reserve(course, room.id, slot)
                rows.append(
                    ScheduledClass(
                        course_id=course.id,
                        instructor_id=course.instructor_id,
                        classroom_id=room.id,
                        day=slot.day,
                        start_time=self.grid.start_time(slot.index),
                        end_time=self.grid.end_time(slot.index),
                        timetable_id=timetable_id,
                    )
                )

        return rows

    def _diagnose(
        self,
        course: Course,
        needed: int,
        achieved: int,
        classrooms: list[Classroom],
        budget: _SearchBudget,
    ) -> UnderScheduledCourse:
        """Build the diagnostic for an under-scheduled course."""
        if achieved == 0 and not find_candidate_rooms(course, classrooms):
            reason = UnscheduledReason.NO_SUITABLE_ROOM
            details = f"No classroom with capacity >= {course.capacity}"
        elif budget.exceeded:
            reason = UnscheduledReason.SEARCH_BUDGET_EXCEEDED
            details = (
                f"Contiguous search stopped after {budget.attempts} attempts; "
                f"scattered fallback placed {achieved}/{needed} slots"
            )
        else:
            reason = UnscheduledReason.INSUFFICIENT_SLOTS
            details = (
                f"No contiguous block of {needed} slots; "
                f"scattered fallback placed {achieved}/{needed} slots"
            )

        return UnderScheduledCourse(
            course_id=course.id,
            course_code=course.code,
            slots_requested=needed,
            slots_achieved=achieved,
            reason=reason,
            details=details,
        )

    def _compute_statistics(
        self,
        result: ScheduleResult,
        total_courses: int,
        placements: dict[PlacementKind, int],
        requested: int,
        achieved: int,
    ) -> ScheduleStatistics:
        """Compute statistics for the generated schedule."""
        by_day: dict[str, int] = {day: 0 for day in self.grid.days}
        by_classroom: dict[int, int] = defaultdict(int)

        for row in result.scheduled_classes:
            by_day[row.day] = by_day.get(row.day, 0) + 1
            by_classroom[row.classroom_id] += 1

        return ScheduleStatistics(
            total_courses=total_courses,
            fully_placed=total_courses - len(result.diagnostics),
            under_scheduled=len(result.diagnostics),
            contiguous_placements=placements[PlacementKind.CONTIGUOUS],
            scattered_placements=placements[PlacementKind.SCATTERED],
            slots_requested=requested,
            slots_achieved=achieved,
            by_day=by_day,
            by_classroom=dict(by_classroom),
        )


def generate(
    courses: Iterable[Course | dict],
    instructors: Iterable[Instructor | dict],
    classrooms: Iterable[Classroom | dict],
    constraints: Iterable[Constraint | dict],
    timetable_id: int,
    rng: random.Random | None = None,
    grid: TimeGrid | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    time_limit: float | None = None,
    seed: int | None = None,
) -> ScheduleResult:
    """Generate a timetable in one call.

    Args:
        courses: Courses to place
        instructors: Known instructors
        classrooms: Available classrooms
        constraints: Typed constraints or wire records
        timetable_id: Owning timetable id
        rng: Randomness source; takes precedence over `seed`
        grid: Weekly grid; defaults to the standard one
        max_attempts: Contiguous-phase attempt budget per course
        time_limit: Wall-clock budget in seconds for the contiguous phase
        seed: Seed for a private random.Random when `rng` is not given

    Returns:
        ScheduleResult
    """
    if rng is None:
        rng = random.Random(seed)

    generator = TimetableGenerator(
        grid=grid, rng=rng, max_attempts=max_attempts, time_limit=time_limit
    )
    result = generator.generate(courses, instructors, classrooms, constraints, timetable_id)
    result.seed = seed
    return result
