"""timetable-gen - weekly university timetable generation and auditing.

This module places courses into a fixed weekly grid of days and time slots,
respecting instructor and room unavailability and pairwise course conflicts,
and reports residual double bookings in finished schedules.

Example usage:
    import random

    from timetable_gen import generate, audit_conflicts
    from timetable_gen.scheduler import ConfigLoader

    config = ConfigLoader("data")
    result = generate(
        config.courses.courses,
        config.instructors.instructors,
        config.rooms.classrooms,
        config.constraints,
        timetable_id=1,
        rng=random.Random(42),
        grid=config.grid,
    )

    for diagnostic in result.diagnostics:
        print(f"{diagnostic.course_code}: {diagnostic.slots_achieved}/{diagnostic.slots_requested}")

    report = audit_conflicts(result.scheduled_classes)
    print(f"Conflicts: {report.total_conflicts}")

    # Export to JSON
    from timetable_gen.exporters import JSONExporter
    JSONExporter().export(result, "output/schedule.json")
"""

from .exceptions import (
    InputFileError,
    InvalidConstraintError,
    InvalidDataError,
    InvalidGridError,
    InvalidTimeSlotError,
    TimetableError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .scheduler import (
    AuditMode,
    Classroom,
    ConflictReport,
    Course,
    Instructor,
    ScheduledClass,
    ScheduleResult,
    TimeGrid,
    TimetableGenerator,
    UnderScheduledCourse,
    audit_conflicts,
    generate,
)

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "generate",
    "audit_conflicts",
    "AuditMode",
    "TimetableGenerator",
    # Models
    "Course",
    "Instructor",
    "Classroom",
    "TimeGrid",
    "ScheduledClass",
    "ScheduleResult",
    "UnderScheduledCourse",
    "ConflictReport",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    # Exceptions
    "TimetableError",
    "InvalidConstraintError",
    "InvalidTimeSlotError",
    "InvalidGridError",
    "InvalidDataError",
    "InputFileError",
]
