"""Tests for scheduler data models."""

import pytest

from timetable_gen.exceptions import InvalidGridError, InvalidTimeSlotError
from timetable_gen.scheduler.models import (
    Course,
    ScheduledClass,
    ScheduleResult,
    ScheduleStatistics,
    Slot,
    TimeGrid,
    UnderScheduledCourse,
    UnscheduledReason,
)


class TestCourse:
    """Tests for Course.from_dict."""

    def test_camel_case(self):
        course = Course.from_dict(
            {"id": "4", "code": "CS101", "credits": "3.5", "capacity": 40, "instructorId": 2}
        )
        assert course == Course(id=4, code="CS101", credits=3.5, capacity=40, instructor_id=2)

    def test_snake_case_with_department(self):
        course = Course.from_dict(
            {"id": 1, "code": "A", "credits": 1, "capacity": 5, "instructor_id": 3, "department_id": 9}
        )
        assert course.instructor_id == 3
        assert course.department_id == 9


class TestTimeGrid:
    """Tests for TimeGrid class."""

    def test_default_grid(self):
        grid = TimeGrid()
        assert grid.days[0] == "Monday"
        assert grid.slot_count == 8
        assert grid.start_time(0) == "09:00"
        assert grid.end_time(7) == "16:50"

    def test_cells_are_day_major(self, small_grid):
        cells = small_grid.cells()
        assert len(cells) == 20
        assert cells[:2] == [Slot("Monday", 0), Slot("Monday", 1)]
        assert cells[-1] == Slot("Friday", 3)

    def test_empty_days(self):
        with pytest.raises(InvalidGridError):
            TimeGrid(days=(), time_slots=("09:00-09:50",))

    def test_duplicate_slots(self):
        with pytest.raises(InvalidGridError):
            TimeGrid(days=("Monday",), time_slots=("09:00-09:50", "09:00-09:50"))

    def test_slots_out_of_order(self):
        with pytest.raises(InvalidGridError, match="starts before the previous slot"):
            TimeGrid(days=("Monday",), time_slots=("10:00-10:50", "09:00-09:50"))

    def test_overlapping_slots(self):
        with pytest.raises(InvalidGridError, match="09:30-10:30"):
            TimeGrid(days=("Monday",), time_slots=("09:00-10:00", "09:30-10:30"))

    def test_back_to_back_slots_allowed(self):
        grid = TimeGrid(days=("Monday",), time_slots=("09:00-10:00", "10:00-11:00"))
        assert grid.end_time(0) == grid.start_time(1)

    def test_malformed_slot(self):
        with pytest.raises(InvalidTimeSlotError):
            TimeGrid(days=("Monday",), time_slots=("9am",))

    def test_from_dict_defaults(self):
        grid = TimeGrid.from_dict({"days": ["Saturday"]})
        assert grid.days == ("Saturday",)
        assert grid.slot_count == 8

    def test_round_trip(self, small_grid):
        assert TimeGrid.from_dict(small_grid.to_dict()) == small_grid


class TestScheduledClass:
    """Tests for the wire shape of output rows."""

    def test_to_dict_uses_wire_keys(self):
        row = ScheduledClass(
            course_id=1,
            instructor_id=2,
            classroom_id=3,
            day="Monday",
            start_time="09:00",
            end_time="10:00",
            timetable_id=7,
        )
        assert row.to_dict() == {
            "id": 0,
            "courseId": 1,
            "instructorId": 2,
            "classroomId": 3,
            "day": "Monday",
            "startTime": "09:00",
            "endTime": "10:00",
            "timetableId": 7,
        }

    def test_from_snake_case(self):
        row = ScheduledClass.from_dict(
            {
                "course_id": 1,
                "instructor_id": 2,
                "classroom_id": 3,
                "day": "Friday",
                "start_time": "15:00",
                "end_time": "15:50",
            }
        )
        assert row.time_key == ("Friday", "15:00", "15:50")
        assert row.timetable_id == 0


class TestScheduleResult:
    """Tests for ScheduleResult serialization."""

    def test_from_dict_restores_rows_and_diagnostics(self, small_grid):
        result = ScheduleResult(
            timetable_id=3,
            grid=small_grid,
            scheduled_classes=[
                ScheduledClass(1, 2, 3, "Monday", "09:00", "09:50", 3),
            ],
            diagnostics=[
                UnderScheduledCourse(4, "BIG", 2, 0, UnscheduledReason.NO_SUITABLE_ROOM, "none"),
            ],
            statistics=ScheduleStatistics(total_courses=2, by_classroom={3: 1}),
            seed=9,
        )

        restored = ScheduleResult.from_dict(result.to_dict())

        assert restored.timetable_id == 3
        assert restored.grid == small_grid
        assert restored.scheduled_classes == result.scheduled_classes
        assert restored.diagnostics[0].reason == UnscheduledReason.NO_SUITABLE_ROOM
        assert restored.statistics.by_classroom == {3: 1}
        assert restored.seed == 9

    def test_placement_rate(self):
        stats = ScheduleStatistics(slots_requested=4, slots_achieved=3)
        assert stats.to_dict()["placement_rate"] == 0.75
        assert ScheduleStatistics().to_dict()["placement_rate"] == 0.0
