"""Constraint parsing and lookup index for timetable generation."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from ..exceptions import InvalidConstraintError
from .models import (
    Constraint,
    ConstraintType,
    Course,
    CourseConflict,
    InstructorUnavailable,
    RoomUnavailable,
)

logger = logging.getLogger(__name__)


def _parse_id(value: Any, field_name: str) -> int:
    """Parse an integer identifier, rejecting anything non-numeric."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    text = str(value).strip() if value is not None else ""
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"{field_name} must be an integer, got {value!r}") from None


def parse_constraint(record: dict[str, Any]) -> Constraint:
    """Convert one wire constraint record into its typed variant.

    Wire shape: {type, entityId, day, timeSlot}. For course_conflict records the
    timeSlot field holds the stringified id of the second course; a dedicated
    conflictingCourseId field takes precedence when present.

    Args:
        record: Constraint dictionary

    Returns:
        InstructorUnavailable, RoomUnavailable or CourseConflict

    Raises:
        InvalidConstraintError: If the record type or any identifier is invalid
    """
    raw_type = record.get("type")
    try:
        constraint_type = ConstraintType(raw_type)
    except ValueError:
        valid = ", ".join(t.value for t in ConstraintType)
        raise InvalidConstraintError(
            [f"unknown constraint type {raw_type!r} (expected one of: {valid})"]
        ) from None

    try:
        entity_id = _parse_id(
            record.get("entityId", record.get("entity_id")), "entityId"
        )

        if constraint_type == ConstraintType.COURSE_CONFLICT:
            other = record.get("conflictingCourseId", record.get("conflicting_course_id"))
            if other is None:
                other = record.get("timeSlot", record.get("time_slot"))
            return CourseConflict(
                course_id=entity_id,
                conflicting_course_id=_parse_id(other, "conflicting course id"),
            )

        day = record.get("day")
        time_slot = record.get("timeSlot", record.get("time_slot"))
        if not day or not time_slot:
            raise ValueError(f"{constraint_type.value} requires both day and timeSlot")

        if constraint_type == ConstraintType.INSTRUCTOR_UNAVAILABLE:
            return InstructorUnavailable(entity_id, str(day), str(time_slot))
        return RoomUnavailable(entity_id, str(day), str(time_slot))
    except ValueError as e:
        raise InvalidConstraintError([f"{constraint_type.value}: {e}"]) from None


def parse_constraints(records: Iterable[dict[str, Any] | Constraint]) -> list[Constraint]:
    """Parse every constraint record, collecting all errors before failing.

    Records that are already typed constraints pass through unchanged.

    Raises:
        InvalidConstraintError: Listing every malformed record by position
    """
    constraints: list[Constraint] = []
    errors: list[str] = []

    for position, record in enumerate(records):
        if isinstance(record, (InstructorUnavailable, RoomUnavailable, CourseConflict)):
            constraints.append(record)
            continue
        if not isinstance(record, dict):
            errors.append(f"record {position}: expected an object, got {type(record).__name__}")
            continue
        try:
            constraints.append(parse_constraint(record))
        except InvalidConstraintError as e:
            errors.extend(f"record {position}: {error}" for error in e.errors)

    if errors:
        raise InvalidConstraintError(errors)

    return constraints


class ConstraintIndex:
    """Fast lookups built once from a flat list of constraints.

    - instructor id -> set of unavailable (day, time slot label)
    - classroom id -> set of unavailable (day, time slot label)
    - course id -> set of conflicting course ids (recorded in both directions)
    """

    def __init__(self) -> None:
        self._instructor_unavailable: dict[int, set[tuple[str, str]]] = defaultdict(set)
        self._room_unavailable: dict[int, set[tuple[str, str]]] = defaultdict(set)
        self._course_conflicts: dict[int, set[int]] = defaultdict(set)

    @classmethod
    def build(cls, constraints: Iterable[dict[str, Any] | Constraint]) -> "ConstraintIndex":
        """Build an index from typed constraints or wire records.

        Raises:
            InvalidConstraintError: If any wire record is malformed
        """
        index = cls()
        for constraint in parse_constraints(constraints):
            index.add(constraint)
        return index

    def add(self, constraint: Constraint) -> None:
        """Insert one constraint into the index."""
        if isinstance(constraint, InstructorUnavailable):
            self._instructor_unavailable[constraint.instructor_id].add(
                (constraint.day, constraint.time_slot)
            )
        elif isinstance(constraint, RoomUnavailable):
            self._room_unavailable[constraint.classroom_id].add(
                (constraint.day, constraint.time_slot)
            )
        elif isinstance(constraint, CourseConflict):
            a, b = constraint.course_id, constraint.conflicting_course_id
            if a == b:
                logger.warning(f"Ignoring course {a} declared as conflicting with itself")
                return
            self._course_conflicts[a].add(b)
            self._course_conflicts[b].add(a)
        else:
            raise TypeError(f"Unsupported constraint: {constraint!r}")

    def instructor_unavailable(self, instructor_id: int) -> frozenset[tuple[str, str]]:
        """Unavailable (day, time slot) cells for an instructor."""
        return frozenset(self._instructor_unavailable.get(instructor_id, ()))

    def room_unavailable(self, classroom_id: int) -> frozenset[tuple[str, str]]:
        """Unavailable (day, time slot) cells for a classroom."""
        return frozenset(self._room_unavailable.get(classroom_id, ()))

    def conflicts_of(self, course_id: int) -> frozenset[int]:
        """Ids of every course that may not share a slot with course_id."""
        return frozenset(self._course_conflicts.get(course_id, ()))

    def is_instructor_unavailable(self, instructor_id: int, day: str, time_slot: str) -> bool:
        cells = self._instructor_unavailable.get(instructor_id)
        return bool(cells) and (day, time_slot) in cells

    def is_room_unavailable(self, classroom_id: int, day: str, time_slot: str) -> bool:
        cells = self._room_unavailable.get(classroom_id)
        return bool(cells) and (day, time_slot) in cells

    def score(self, course: Course) -> int:
        """Constrainedness: conflicting courses + instructor unavailable cells."""
        return len(self._course_conflicts.get(course.id, ())) + len(
            self._instructor_unavailable.get(course.instructor_id, ())
        )

    @property
    def instructor_ids(self) -> set[int]:
        return set(self._instructor_unavailable)

    @property
    def classroom_ids(self) -> set[int]:
        return set(self._room_unavailable)

    @property
    def course_ids(self) -> set[int]:
        return set(self._course_conflicts)

    def unavailable_cells(self) -> set[tuple[str, str]]:
        """Every (day, time slot) named by an unavailability constraint."""
        cells: set[tuple[str, str]] = set()
        for entries in self._instructor_unavailable.values():
            cells |= entries
        for entries in self._room_unavailable.values():
            cells |= entries
        return cells
