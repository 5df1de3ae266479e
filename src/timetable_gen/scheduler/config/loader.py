"""Unified input loader."""

import json
from pathlib import Path
from typing import Any

from ...exceptions import InputFileError, InvalidDataError
from ..constraints import parse_constraints
from ..models import Constraint
from .courses import CourseConfig
from .grid import load_grid
from .instructors import InstructorConfig
from .rooms import RoomConfig

REQUIRED_FILES = ["courses.csv", "instructors.csv", "classrooms.csv"]


class ConfigLoader:
    """Unified loader for all timetable input files."""

    def __init__(self, input_dir: Path | str | None = None):
        """
        Initialize the input loader.

        Args:
            input_dir: Path to directory containing input files.
                       Expected files:
                       - courses.csv
                       - instructors.csv
                       - classrooms.csv
                       - constraints.json (optional, list of constraint records)
                       - grid.json (optional, days and time slots)

        Raises:
            InputFileError: If a required file is missing
            InvalidDataError: If a row or the constraints file can't be read
            InvalidConstraintError: If a constraint record is malformed
        """
        if input_dir is None:
            input_dir = Path("data")

        self.input_dir = Path(input_dir)
        self._check_required_files()

        self.courses = CourseConfig(self.input_dir / "courses.csv")
        self.instructors = InstructorConfig(self.input_dir / "instructors.csv")
        self.rooms = RoomConfig(self.input_dir / "classrooms.csv")
        self.grid = load_grid(self._get_path("grid.json"))
        self.constraint_records = self._load_constraint_records()
        self.constraints: list[Constraint] = parse_constraints(self.constraint_records)

    def _check_required_files(self) -> None:
        """Fail early with the list of files that are there."""
        available = (
            sorted(p.name for p in self.input_dir.iterdir())
            if self.input_dir.is_dir()
            else []
        )
        for filename in REQUIRED_FILES:
            path = self.input_dir / filename
            if not path.exists():
                raise InputFileError(str(path), available)

    def _get_path(self, filename: str) -> Path | None:
        """Get path to input file if it exists."""
        path = self.input_dir / filename
        return path if path.exists() else None

    def _load_constraint_records(self) -> list[dict[str, Any]]:
        """Load raw constraint records from constraints.json."""
        path = self._get_path("constraints.json")
        if path is None:
            return []

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        # Accept a bare list or {"constraints": [...]}
        if isinstance(data, dict):
            data = data.get("constraints", [])
        if not isinstance(data, list):
            raise InvalidDataError("expected a list of constraint records", path.name)
        return data
