"""Data models for the timetable generation engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..exceptions import InvalidGridError
from .constants import (
    DEFAULT_TIME_SLOTS,
    DEFAULT_WEEK_DAYS,
    STUDENT_CONFLICTS_NOTE,
    UNSAVED_ROW_ID,
    parse_time_slot,
    time_to_minutes,
)


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (wire camelCase or snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


class ConstraintType(str, Enum):
    """Constraint record types as they appear on the wire."""

    INSTRUCTOR_UNAVAILABLE = "instructor_unavailable"
    ROOM_UNAVAILABLE = "room_unavailable"
    COURSE_CONFLICT = "course_conflict"


class UnscheduledReason(str, Enum):
    """Reasons why a course received fewer slots than it needs."""

    NO_SUITABLE_ROOM = "no_suitable_room"
    INSUFFICIENT_SLOTS = "insufficient_slots"
    SEARCH_BUDGET_EXCEEDED = "search_budget_exceeded"


class UnavailabilityReason(str, Enum):
    """Which feasibility check rejected a (course, slot, room) candidate."""

    INSTRUCTOR_UNAVAILABLE = "instructor_unavailable"
    INSTRUCTOR_BUSY = "instructor_busy"
    ROOM_UNAVAILABLE = "room_unavailable"
    ROOM_BUSY = "room_busy"
    COURSE_CONFLICT = "course_conflict"


class PlacementKind(str, Enum):
    """How a course was placed."""

    CONTIGUOUS = "contiguous"
    SCATTERED = "scattered"
    NONE = "none"


@dataclass(frozen=True)
class Course:
    """A course to be placed in the weekly grid."""

    id: int
    code: str
    credits: float
    capacity: int
    instructor_id: int
    department_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        """Create a Course from a dictionary."""
        department = _pick(data, "departmentId", "department_id")
        return cls(
            id=int(data["id"]),
            code=str(data.get("code", data["id"])),
            credits=float(data.get("credits", 0)),
            capacity=int(data.get("capacity", 0)),
            instructor_id=int(_pick(data, "instructorId", "instructor_id")),
            department_id=int(department) if department is not None else None,
        )


@dataclass(frozen=True)
class Instructor:
    """A course instructor."""

    id: int
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Instructor":
        """Create an Instructor from a dictionary."""
        return cls(id=int(data["id"]), name=str(data.get("name", "")))


@dataclass(frozen=True)
class Classroom:
    """A physical classroom."""

    id: int
    capacity: int
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Classroom":
        """Create a Classroom from a dictionary."""
        return cls(
            id=int(data["id"]),
            capacity=int(data.get("capacity", 0)),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class InstructorUnavailable:
    """Instructor cannot teach at (day, time_slot)."""

    instructor_id: int
    day: str
    time_slot: str

    type = ConstraintType.INSTRUCTOR_UNAVAILABLE


@dataclass(frozen=True)
class RoomUnavailable:
    """Classroom cannot be booked at (day, time_slot)."""

    classroom_id: int
    day: str
    time_slot: str

    type = ConstraintType.ROOM_UNAVAILABLE


@dataclass(frozen=True)
class CourseConflict:
    """Two courses must never share a slot."""

    course_id: int
    conflicting_course_id: int

    type = ConstraintType.COURSE_CONFLICT


Constraint = InstructorUnavailable | RoomUnavailable | CourseConflict


@dataclass(frozen=True, order=True)
class Slot:
    """One cell of the weekly grid: a day and an index into the time slots."""

    day: str
    index: int


@dataclass(frozen=True)
class TimeGrid:
    """The fixed weekly grid: ordered days crossed with ordered time slots."""

    days: tuple[str, ...] = tuple(DEFAULT_WEEK_DAYS)
    time_slots: tuple[str, ...] = tuple(DEFAULT_TIME_SLOTS)
    bounds: tuple[tuple[str, str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(self.days))
        object.__setattr__(self, "time_slots", tuple(self.time_slots))

        if not self.days:
            raise InvalidGridError("Grid has no days")
        if not self.time_slots:
            raise InvalidGridError("Grid has no time slots")
        if len(set(self.days)) != len(self.days):
            raise InvalidGridError(f"Duplicate day labels: {list(self.days)}")
        if len(set(self.time_slots)) != len(self.time_slots):
            raise InvalidGridError(f"Duplicate time slot labels: {list(self.time_slots)}")

        object.__setattr__(
            self, "bounds", tuple(parse_time_slot(label) for label in self.time_slots)
        )

        # Occupancy is keyed by slot index, so slots must be ordered and disjoint
        for (_, previous_end), (start, _), label in zip(
            self.bounds, self.bounds[1:], self.time_slots[1:]
        ):
            if time_to_minutes(start) < time_to_minutes(previous_end):
                raise InvalidGridError(
                    f"Time slot '{label}' starts before the previous slot ends at {previous_end}"
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeGrid":
        """Create a TimeGrid from {"days": [...], "time_slots": [...]}."""
        days = _pick(data, "days", "weekDays", default=DEFAULT_WEEK_DAYS)
        slots = _pick(data, "time_slots", "timeSlots", default=DEFAULT_TIME_SLOTS)
        return cls(days=tuple(days), time_slots=tuple(slots))

    @property
    def slot_count(self) -> int:
        """Number of time slots per day."""
        return len(self.time_slots)

    def label(self, index: int) -> str:
        """Time slot label at index."""
        return self.time_slots[index]

    def start_time(self, index: int) -> str:
        return self.bounds[index][0]

    def end_time(self, index: int) -> str:
        return self.bounds[index][1]

    def cells(self) -> list[Slot]:
        """All grid cells, day-major."""
        return [
            Slot(day, index) for day in self.days for index in range(self.slot_count)
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert grid to dictionary."""
        return {"days": list(self.days), "time_slots": list(self.time_slots)}


@dataclass
class ScheduledClass:
    """An output row: one course occupying one time range in one classroom."""

    course_id: int
    instructor_id: int
    classroom_id: int
    day: str
    start_time: str
    end_time: str
    timetable_id: int
    id: int = UNSAVED_ROW_ID

    @property
    def time_key(self) -> tuple[str, str, str]:
        """(day, start_time, end_time) used to group rows."""
        return (self.day, self.start_time, self.end_time)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledClass":
        """Create a ScheduledClass from the wire shape (or snake_case)."""
        return cls(
            id=int(data.get("id", UNSAVED_ROW_ID) or UNSAVED_ROW_ID),
            course_id=int(_pick(data, "courseId", "course_id")),
            instructor_id=int(_pick(data, "instructorId", "instructor_id")),
            classroom_id=int(_pick(data, "classroomId", "classroom_id")),
            day=str(data["day"]),
            start_time=str(_pick(data, "startTime", "start_time")),
            end_time=str(_pick(data, "endTime", "end_time")),
            timetable_id=int(_pick(data, "timetableId", "timetable_id", default=0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "id": self.id,
            "courseId": self.course_id,
            "instructorId": self.instructor_id,
            "classroomId": self.classroom_id,
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "timetableId": self.timetable_id,
        }


@dataclass
class UnderScheduledCourse:
    """A course that received fewer slots than it needs."""

    course_id: int
    course_code: str
    slots_requested: int
    slots_achieved: int
    reason: UnscheduledReason
    details: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UnderScheduledCourse":
        """Create from the dictionary written by to_dict."""
        return cls(
            course_id=int(_pick(data, "courseId", "course_id", default=0)),
            course_code=str(_pick(data, "courseCode", "course_code", default="")),
            slots_requested=int(_pick(data, "slotsRequested", "slots_requested", default=0)),
            slots_achieved=int(_pick(data, "slotsAchieved", "slots_achieved", default=0)),
            reason=UnscheduledReason(data.get("reason", UnscheduledReason.INSUFFICIENT_SLOTS)),
            details=str(data.get("details", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "courseId": self.course_id,
            "courseCode": self.course_code,
            "slotsRequested": self.slots_requested,
            "slotsAchieved": self.slots_achieved,
            "reason": self.reason.value,
            "details": self.details,
        }


@dataclass
class ScheduleStatistics:
    """Statistics about the generated schedule."""

    total_courses: int = 0
    fully_placed: int = 0
    under_scheduled: int = 0
    contiguous_placements: int = 0
    scattered_placements: int = 0
    slots_requested: int = 0
    slots_achieved: int = 0
    by_day: dict[str, int] = field(default_factory=dict)
    by_classroom: dict[int, int] = field(default_factory=dict)
    generation_time_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_courses": self.total_courses,
            "fully_placed": self.fully_placed,
            "under_scheduled": self.under_scheduled,
            "contiguous_placements": self.contiguous_placements,
            "scattered_placements": self.scattered_placements,
            "slots_requested": self.slots_requested,
            "slots_achieved": self.slots_achieved,
            "placement_rate": (
                self.slots_achieved / self.slots_requested
                if self.slots_requested > 0
                else 0.0
            ),
            "by_day": self.by_day,
            "by_classroom": {str(k): v for k, v in self.by_classroom.items()},
            "generation_time_seconds": self.generation_time_seconds,
        }


@dataclass
class ScheduleResult:
    """Result of a generation run."""

    timetable_id: int
    grid: TimeGrid = field(default_factory=TimeGrid)
    scheduled_classes: list[ScheduledClass] = field(default_factory=list)
    diagnostics: list[UnderScheduledCourse] = field(default_factory=list)
    budget_exceeded: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())
    seed: int | None = None

    @property
    def total_scheduled(self) -> int:
        """Total number of output rows."""
        return len(self.scheduled_classes)

    @property
    def is_complete(self) -> bool:
        """True when every course received all the slots it needs."""
        return not self.diagnostics

    def classes_for_course(self, course_id: int) -> list[ScheduledClass]:
        """Rows belonging to one course."""
        return [c for c in self.scheduled_classes if c.course_id == course_id]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleResult":
        """Rebuild a result from an exported schedule JSON.

        Statistics are restored for the counters only; per-day and per-room
        breakdowns are kept as written.
        """
        stats = data.get("statistics", {})
        statistics = ScheduleStatistics(
            **{
                key: stats[key]
                for key in (
                    "total_courses",
                    "fully_placed",
                    "under_scheduled",
                    "contiguous_placements",
                    "scattered_placements",
                    "slots_requested",
                    "slots_achieved",
                    "by_day",
                    "generation_time_seconds",
                )
                if key in stats
            }
        )
        statistics.by_classroom = {
            int(k): v for k, v in stats.get("by_classroom", {}).items()
        }

        return cls(
            timetable_id=int(data.get("timetable_id", 0)),
            grid=TimeGrid.from_dict(data.get("grid", {})),
            scheduled_classes=[
                ScheduledClass.from_dict(r) for r in data.get("scheduled_classes", [])
            ],
            diagnostics=[
                UnderScheduledCourse.from_dict(d) for d in data.get("diagnostics", [])
            ],
            budget_exceeded=list(data.get("budget_exceeded", [])),
            warnings=list(data.get("warnings", [])),
            statistics=statistics,
            generation_date=data.get("generation_date") or datetime.now().isoformat(),
            seed=data.get("seed"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "timetable_id": self.timetable_id,
            "seed": self.seed,
            "grid": self.grid.to_dict(),
            "scheduled_classes": [c.to_dict() for c in self.scheduled_classes],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "budget_exceeded": self.budget_exceeded,
            "warnings": self.warnings,
            "statistics": self.statistics.to_dict(),
        }


@dataclass
class ConflictGroup:
    """Rows that double-book one instructor or one classroom."""

    kind: str
    entity_id: int
    day: str
    start_time: str
    end_time: str
    classes: list[ScheduledClass] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.classes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        id_key = "instructorId" if self.kind == "instructor" else "classroomId"
        return {
            id_key: self.entity_id,
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "classes": [c.to_dict() for c in self.classes],
        }


@dataclass
class InvalidRow:
    """A schedule row the auditor could not read; left out of the checks."""

    position: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"position": self.position, "reason": self.reason}


@dataclass
class ConflictReport:
    """Collisions found by the conflict auditor."""

    instructor_conflicts: list[ConflictGroup] = field(default_factory=list)
    classroom_conflicts: list[ConflictGroup] = field(default_factory=list)
    # Always empty; see student_conflicts_note
    student_conflicts: list[Any] = field(default_factory=list)
    student_conflicts_note: str = STUDENT_CONFLICTS_NOTE
    # Rows skipped because they could not be read or compared
    invalid_rows: list[InvalidRow] = field(default_factory=list)

    @property
    def total_conflicts(self) -> int:
        return len(self.instructor_conflicts) + len(self.classroom_conflicts)

    @property
    def has_conflicts(self) -> bool:
        return self.total_conflicts > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "instructorConflicts": [g.to_dict() for g in self.instructor_conflicts],
            "classroomConflicts": [g.to_dict() for g in self.classroom_conflicts],
            "studentConflicts": list(self.student_conflicts),
            "studentConflictsNote": self.student_conflicts_note,
            "invalidRows": [r.to_dict() for r in self.invalid_rows],
        }
