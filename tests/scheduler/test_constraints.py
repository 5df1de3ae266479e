"""Tests for constraint parsing and ConstraintIndex."""

import pytest

from timetable_gen.exceptions import InvalidConstraintError
from timetable_gen.scheduler.constraints import (
    ConstraintIndex,
    parse_constraint,
    parse_constraints,
)
from timetable_gen.scheduler.models import (
    Course,
    CourseConflict,
    InstructorUnavailable,
    RoomUnavailable,
)


class TestParseConstraint:
    """Tests for converting wire records into typed constraints."""

    def test_instructor_unavailable(self):
        constraint = parse_constraint(
            {"type": "instructor_unavailable", "entityId": 7, "day": "Monday", "timeSlot": "09:00-09:50"}
        )
        assert constraint == InstructorUnavailable(7, "Monday", "09:00-09:50")

    def test_room_unavailable(self):
        constraint = parse_constraint(
            {"type": "room_unavailable", "entityId": "3", "day": "Friday", "timeSlot": "16:00-16:50"}
        )
        assert constraint == RoomUnavailable(3, "Friday", "16:00-16:50")

    def test_course_conflict_reads_second_id_from_time_slot(self):
        constraint = parse_constraint(
            {"type": "course_conflict", "entityId": 1, "day": "", "timeSlot": "4"}
        )
        assert constraint == CourseConflict(1, 4)

    def test_course_conflict_prefers_dedicated_field(self):
        constraint = parse_constraint(
            {"type": "course_conflict", "entityId": 1, "timeSlot": "4", "conflictingCourseId": 9}
        )
        assert constraint == CourseConflict(1, 9)

    def test_snake_case_keys(self):
        constraint = parse_constraint(
            {"type": "instructor_unavailable", "entity_id": 2, "day": "Tuesday", "time_slot": "10:00-10:50"}
        )
        assert constraint == InstructorUnavailable(2, "Tuesday", "10:00-10:50")

    def test_malformed_course_conflict_id(self):
        with pytest.raises(InvalidConstraintError) as exc_info:
            parse_constraint({"type": "course_conflict", "entityId": 1, "timeSlot": "09:00-09:50"})
        assert "conflicting course id" in exc_info.value.errors[0]

    def test_unknown_type(self):
        with pytest.raises(InvalidConstraintError, match="unknown constraint type"):
            parse_constraint({"type": "lunch_break", "entityId": 1})

    def test_missing_day(self):
        with pytest.raises(InvalidConstraintError, match="requires both day and timeSlot"):
            parse_constraint({"type": "room_unavailable", "entityId": 1, "timeSlot": "09:00-09:50"})

    def test_boolean_id_rejected(self):
        with pytest.raises(InvalidConstraintError):
            parse_constraint(
                {"type": "instructor_unavailable", "entityId": True, "day": "Monday", "timeSlot": "09:00-09:50"}
            )


class TestParseConstraints:
    """Tests for parsing a whole list of records."""

    def test_collects_every_error(self):
        records = [
            {"type": "course_conflict", "entityId": 1, "timeSlot": "x"},
            {"type": "instructor_unavailable", "entityId": 1, "day": "Monday", "timeSlot": "09:00-09:50"},
            {"type": "nope", "entityId": 1},
        ]
        with pytest.raises(InvalidConstraintError) as exc_info:
            parse_constraints(records)

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("record 0:")
        assert errors[1].startswith("record 2:")

    def test_non_object_record(self):
        records = [
            "oops",
            {"type": "course_conflict", "entityId": 1, "timeSlot": "2"},
            None,
        ]
        with pytest.raises(InvalidConstraintError) as exc_info:
            parse_constraints(records)

        assert exc_info.value.errors == [
            "record 0: expected an object, got str",
            "record 2: expected an object, got NoneType",
        ]

    def test_typed_constraints_pass_through(self):
        typed = CourseConflict(1, 2)
        assert parse_constraints([typed]) == [typed]

    def test_empty(self):
        assert parse_constraints([]) == []


class TestConstraintIndex:
    """Tests for ConstraintIndex lookups."""

    def test_instructor_lookup(self):
        index = ConstraintIndex.build([InstructorUnavailable(1, "Monday", "09:00-09:50")])
        assert index.is_instructor_unavailable(1, "Monday", "09:00-09:50")
        assert not index.is_instructor_unavailable(1, "Monday", "10:00-10:50")
        assert not index.is_instructor_unavailable(2, "Monday", "09:00-09:50")
        assert index.instructor_unavailable(1) == frozenset({("Monday", "09:00-09:50")})

    def test_room_lookup(self):
        index = ConstraintIndex.build([RoomUnavailable(5, "Friday", "16:00-16:50")])
        assert index.is_room_unavailable(5, "Friday", "16:00-16:50")
        assert not index.is_room_unavailable(5, "Thursday", "16:00-16:50")
        assert index.room_unavailable(6) == frozenset()

    def test_course_conflicts_are_symmetric(self):
        index = ConstraintIndex.build([CourseConflict(1, 2)])
        assert index.conflicts_of(1) == frozenset({2})
        assert index.conflicts_of(2) == frozenset({1})
        assert index.conflicts_of(3) == frozenset()

    def test_duplicate_conflict_counted_once(self):
        index = ConstraintIndex.build([CourseConflict(1, 2), CourseConflict(2, 1)])
        assert index.conflicts_of(1) == frozenset({2})

    def test_self_conflict_ignored(self):
        index = ConstraintIndex.build([CourseConflict(4, 4)])
        assert index.conflicts_of(4) == frozenset()

    def test_build_from_wire_records(self, sample_constraint_records):
        index = ConstraintIndex.build(sample_constraint_records)
        assert index.is_instructor_unavailable(1, "Monday", "09:00-09:50")
        assert index.is_room_unavailable(2, "Tuesday", "10:00-10:50")
        assert index.conflicts_of(3) == frozenset({1})

    def test_build_rejects_malformed_record(self):
        with pytest.raises(InvalidConstraintError):
            ConstraintIndex.build([{"type": "course_conflict", "entityId": 1, "timeSlot": ""}])

    def test_score(self):
        index = ConstraintIndex.build(
            [
                CourseConflict(1, 2),
                CourseConflict(1, 3),
                InstructorUnavailable(10, "Monday", "09:00-09:50"),
            ]
        )
        course = Course(id=1, code="A", credits=3, capacity=10, instructor_id=10)
        assert index.score(course) == 3

    def test_referenced_ids(self):
        index = ConstraintIndex.build(
            [
                InstructorUnavailable(1, "Monday", "09:00-09:50"),
                RoomUnavailable(2, "Monday", "09:00-09:50"),
                CourseConflict(3, 4),
            ]
        )
        assert index.instructor_ids == {1}
        assert index.classroom_ids == {2}
        assert index.course_ids == {3, 4}
        assert index.unavailable_cells() == {("Monday", "09:00-09:50")}
