"""Test fixtures for timetable generation tests."""

import csv
import json
from pathlib import Path

import pytest

from timetable_gen.scheduler.models import Classroom, Course, Instructor, TimeGrid


def write_csv(path: Path, fieldnames: list[str], rows: list[dict]) -> Path:
    """Write rows to a CSV file with a header."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def small_grid():
    """Monday-Friday with four slots per day."""
    return TimeGrid(
        days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
        time_slots=("09:00-09:50", "10:00-10:50", "11:00-11:50", "12:00-12:50"),
    )


@pytest.fixture
def two_day_grid():
    """Two days with two slots each, small enough to block by hand."""
    return TimeGrid(
        days=("Monday", "Tuesday"),
        time_slots=("09:00-09:50", "10:00-10:50"),
    )


@pytest.fixture
def sample_instructors():
    return [
        Instructor(id=1, name="Ada Byron"),
        Instructor(id=2, name="Alan Turing"),
        Instructor(id=3, name="Emmy Noether"),
    ]


@pytest.fixture
def sample_classrooms():
    return [
        Classroom(id=1, capacity=30, name="A-101"),
        Classroom(id=2, capacity=60, name="A-205"),
        Classroom(id=3, capacity=120, name="B-110"),
    ]


@pytest.fixture
def sample_courses():
    """Courses covering every credit band."""
    return [
        Course(id=1, code="CS101", credits=4, capacity=50, instructor_id=1),
        Course(id=2, code="CS102", credits=3, capacity=25, instructor_id=1),
        Course(id=3, code="MATH101", credits=3, capacity=100, instructor_id=2),
        Course(id=4, code="MATH210", credits=2, capacity=20, instructor_id=2),
        Course(id=5, code="PHYS101", credits=1, capacity=40, instructor_id=3),
    ]


@pytest.fixture
def sample_constraint_records():
    """Wire-format constraint records."""
    return [
        {"type": "instructor_unavailable", "entityId": 1, "day": "Monday", "timeSlot": "09:00-09:50"},
        {"type": "room_unavailable", "entityId": 2, "day": "Tuesday", "timeSlot": "10:00-10:50"},
        {"type": "course_conflict", "entityId": 1, "day": "", "timeSlot": "3"},
    ]


@pytest.fixture
def input_dir(tmp_path, sample_constraint_records):
    """A complete input directory as read by ConfigLoader."""
    directory = tmp_path / "input"
    directory.mkdir()

    write_csv(
        directory / "courses.csv",
        ["id", "code", "credits", "capacity", "instructor_id", "department_id"],
        [
            {"id": 1, "code": "CS101", "credits": 4, "capacity": 50, "instructor_id": 1, "department_id": 1},
            {"id": 2, "code": "CS102", "credits": 3, "capacity": 25, "instructor_id": 1, "department_id": 1},
            {"id": 3, "code": "MATH101", "credits": 3, "capacity": 100, "instructor_id": 2, "department_id": ""},
            {"id": 4, "code": "PHYS101", "credits": 1, "capacity": 40, "instructor_id": 3, "department_id": 2},
        ],
    )
    write_csv(
        directory / "instructors.csv",
        ["id", "name"],
        [
            {"id": 1, "name": "Ada Byron"},
            {"id": 2, "name": "Alan Turing"},
            {"id": 3, "name": "Emmy Noether"},
        ],
    )
    write_csv(
        directory / "classrooms.csv",
        ["id", "name", "capacity"],
        [
            {"id": 1, "name": "A-101", "capacity": 30},
            {"id": 2, "name": "A-205", "capacity": 60},
            {"id": 3, "name": "B-110", "capacity": 120},
        ],
    )
    with open(directory / "constraints.json", "w", encoding="utf-8") as f:
        json.dump(sample_constraint_records, f)

    return directory
