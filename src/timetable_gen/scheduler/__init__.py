"""Weekly timetable generation with a greedy, most-constrained-first allocator.

This package places courses into a fixed weekly grid of (day, time slot)
cells while respecting instructor unavailability, room unavailability and
pairwise course conflicts, and audits finished schedules for double bookings.

Main classes:
- TimetableGenerator: Randomized slot allocator (contiguous block first,
  scattered slots as fallback)
- ConstraintIndex: Lookup structures built from constraint records
- ConfigLoader: Loads courses, instructors, classrooms, constraints and the
  grid from an input directory

Usage:
    import random

    from timetable_gen.scheduler import audit_conflicts, generate

    result = generate(courses, instructors, classrooms, constraints,
                      timetable_id=1, rng=random.Random(42))
    report = audit_conflicts(result.scheduled_classes)
"""

from .algorithm import TimetableGenerator, generate
from .audit import AuditMode, audit_conflicts
from .config import ConfigLoader
from .conflicts import OccupancyMaps, check_feasibility, is_block_feasible, is_feasible
from .constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIME_SLOTS,
    DEFAULT_WEEK_DAYS,
    parse_time_slot,
)
from .constraints import ConstraintIndex, parse_constraint, parse_constraints
from .exporter import export_schedule_json, load_schedule
from .models import (
    Classroom,
    ConflictGroup,
    ConflictReport,
    Constraint,
    ConstraintType,
    Course,
    CourseConflict,
    Instructor,
    InstructorUnavailable,
    InvalidRow,
    RoomUnavailable,
    ScheduledClass,
    ScheduleResult,
    ScheduleStatistics,
    Slot,
    TimeGrid,
    UnderScheduledCourse,
    UnscheduledReason,
)
from .utils import find_candidate_rooms, slots_needed, sort_courses_by_priority

__all__ = [
    # Main entry points
    "TimetableGenerator",
    "generate",
    "audit_conflicts",
    "AuditMode",
    # Configuration
    "ConfigLoader",
    # Constraints and feasibility
    "ConstraintIndex",
    "parse_constraint",
    "parse_constraints",
    "OccupancyMaps",
    "check_feasibility",
    "is_feasible",
    "is_block_feasible",
    # Models
    "Classroom",
    "ConflictGroup",
    "ConflictReport",
    "Constraint",
    "ConstraintType",
    "Course",
    "CourseConflict",
    "Instructor",
    "InstructorUnavailable",
    "InvalidRow",
    "RoomUnavailable",
    "ScheduledClass",
    "ScheduleResult",
    "ScheduleStatistics",
    "Slot",
    "TimeGrid",
    "UnderScheduledCourse",
    "UnscheduledReason",
    # Constants
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_TIME_SLOTS",
    "DEFAULT_WEEK_DAYS",
    # Utilities
    "export_schedule_json",
    "find_candidate_rooms",
    "load_schedule",
    "parse_time_slot",
    "slots_needed",
    "sort_courses_by_priority",
]
