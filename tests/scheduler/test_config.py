"""Tests for input configuration loaders."""

import json

import pytest

from timetable_gen.exceptions import InputFileError, InvalidConstraintError, InvalidDataError
from timetable_gen.scheduler.config import (
    ConfigLoader,
    CourseConfig,
    InstructorConfig,
    RoomConfig,
    load_grid,
)
from timetable_gen.scheduler.models import CourseConflict, InstructorUnavailable, TimeGrid


class TestRoomConfig:
    """Tests for RoomConfig class."""

    def test_load(self, tmp_path):
        path = tmp_path / "classrooms.csv"
        path.write_text("id,name,capacity\n1,A-101,30\n2,B-202,80\n", encoding="utf-8")

        config = RoomConfig(path)

        assert len(config.get_all_classrooms()) == 2
        assert config.get_classroom(2).name == "B-202"
        assert config.get_classroom(3) is None
        assert [r.id for r in config.get_rooms_by_capacity(50)] == [2]

    def test_bad_capacity_reports_row(self, tmp_path):
        path = tmp_path / "classrooms.csv"
        path.write_text("id,name,capacity\n1,A-101,30\n2,B-202,lots\n", encoding="utf-8")

        with pytest.raises(InvalidDataError) as exc_info:
            RoomConfig(path)
        assert exc_info.value.row == 3
        assert exc_info.value.file_name == "classrooms.csv"

    def test_duplicate_id(self, tmp_path):
        path = tmp_path / "classrooms.csv"
        path.write_text("id,name,capacity\n1,A,30\n1,B,40\n", encoding="utf-8")

        with pytest.raises(InvalidDataError, match="duplicate classroom id 1"):
            RoomConfig(path)

    def test_missing_file_is_empty(self, tmp_path):
        assert RoomConfig(tmp_path / "missing.csv").classrooms == []


class TestCourseConfig:
    """Tests for CourseConfig class."""

    def test_load(self, tmp_path):
        path = tmp_path / "courses.csv"
        path.write_text(
            "id,code,credits,capacity,instructor_id,department_id\n"
            "1,CS101,4,50,1,2\n"
            "2,CS102,2.5,20,1,\n",
            encoding="utf-8",
        )

        config = CourseConfig(path)

        assert config.get_course(1).department_id == 2
        assert config.get_course(2).department_id is None
        assert config.get_course(2).credits == 2.5
        assert config.get_codes() == {1: "CS101", 2: "CS102"}

    def test_missing_column(self, tmp_path):
        path = tmp_path / "courses.csv"
        path.write_text("id,code,credits\n1,CS101,4\n", encoding="utf-8")

        with pytest.raises(InvalidDataError):
            CourseConfig(path)


class TestInstructorConfig:
    """Tests for InstructorConfig class."""

    def test_names(self, tmp_path):
        path = tmp_path / "instructors.csv"
        path.write_text("id,name\n1,Ada Byron\n2,\n", encoding="utf-8")

        config = InstructorConfig(path)

        assert config.get_name(1) == "Ada Byron"
        assert config.get_name(2) == "Instructor 2"
        assert config.get_instructor(3) is None


class TestLoadGrid:
    """Tests for load_grid."""

    def test_missing_file_gives_default(self, tmp_path):
        assert load_grid(tmp_path / "grid.json") == TimeGrid()
        assert load_grid(None) == TimeGrid()

    def test_custom_grid(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(
            json.dumps({"days": ["Monday", "Wednesday"], "time_slots": ["08:00-09:20"]}),
            encoding="utf-8",
        )

        grid = load_grid(path)

        assert grid.days == ("Monday", "Wednesday")
        assert grid.bounds == (("08:00", "09:20"),)


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    def test_loads_everything(self, input_dir):
        config = ConfigLoader(input_dir)

        assert len(config.courses.courses) == 4
        assert len(config.instructors.instructors) == 3
        assert len(config.rooms.classrooms) == 3
        assert config.grid == TimeGrid()
        assert len(config.constraint_records) == 3
        assert InstructorUnavailable(1, "Monday", "09:00-09:50") in config.constraints
        assert CourseConflict(1, 3) in config.constraints

    def test_missing_required_file(self, input_dir):
        (input_dir / "classrooms.csv").unlink()

        with pytest.raises(InputFileError) as exc_info:
            ConfigLoader(input_dir)
        assert "courses.csv" in exc_info.value.available_files

    def test_constraints_are_optional(self, input_dir):
        (input_dir / "constraints.json").unlink()
        assert ConfigLoader(input_dir).constraints == []

    def test_wrapped_constraints(self, input_dir):
        records = [{"type": "course_conflict", "entityId": 2, "timeSlot": "4"}]
        (input_dir / "constraints.json").write_text(
            json.dumps({"constraints": records}), encoding="utf-8"
        )
        assert ConfigLoader(input_dir).constraints == [CourseConflict(2, 4)]

    def test_constraints_not_a_list(self, input_dir):
        (input_dir / "constraints.json").write_text('"nope"', encoding="utf-8")
        with pytest.raises(InvalidDataError):
            ConfigLoader(input_dir)

    def test_malformed_constraint(self, input_dir):
        records = [{"type": "course_conflict", "entityId": 2, "timeSlot": "09:00-09:50"}]
        (input_dir / "constraints.json").write_text(json.dumps(records), encoding="utf-8")
        with pytest.raises(InvalidConstraintError):
            ConfigLoader(input_dir)

    def test_non_object_constraint_record(self, input_dir):
        (input_dir / "constraints.json").write_text(json.dumps([42]), encoding="utf-8")
        with pytest.raises(InvalidConstraintError) as exc_info:
            ConfigLoader(input_dir)
        assert exc_info.value.errors == ["record 0: expected an object, got int"]
