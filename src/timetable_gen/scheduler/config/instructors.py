"""Instructor configuration loader."""

import csv
from pathlib import Path

from ...exceptions import InvalidDataError
from ..models import Instructor


class InstructorConfig:
    """Loader for instructors from instructors.csv (id, name)."""

    def __init__(self, instructors_path: Path | None = None):
        self.instructors: list[Instructor] = []
        self._by_id: dict[int, Instructor] = {}

        if instructors_path and instructors_path.exists():
            self._load(instructors_path)

    def _load(self, path: Path) -> None:
        """Load instructors from CSV file."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row_number, row in enumerate(reader, start=2):
                try:
                    instructor = Instructor(
                        id=int(row["id"]),
                        name=(row.get("name") or "").strip(),
                    )
                except (KeyError, TypeError, ValueError) as e:
                    raise InvalidDataError(str(e), path.name, row_number) from None

                self.instructors.append(instructor)
                self._by_id[instructor.id] = instructor

    def get_instructor(self, instructor_id: int) -> Instructor | None:
        """Get an instructor by id."""
        return self._by_id.get(instructor_id)

    def get_name(self, instructor_id: int) -> str:
        """Instructor display name, falling back to the id."""
        instructor = self._by_id.get(instructor_id)
        if instructor and instructor.name:
            return instructor.name
        return f"Instructor {instructor_id}"
