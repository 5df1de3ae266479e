"""Course configuration loader."""

import csv
from pathlib import Path

from ...exceptions import InvalidDataError
from ..models import Course


class CourseConfig:
    """Loader for courses from courses.csv.

    Columns: id, code, credits, capacity, instructor_id, department_id
    (department_id may be empty).
    """

    def __init__(self, courses_path: Path | None = None):
        self.courses: list[Course] = []
        self._by_id: dict[int, Course] = {}

        if courses_path and courses_path.exists():
            self._load(courses_path)

    def _load(self, path: Path) -> None:
        """Load courses from CSV file."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row_number, row in enumerate(reader, start=2):
                try:
                    department = (row.get("department_id") or "").strip()
                    course = Course(
                        id=int(row["id"]),
                        code=row["code"].strip(),
                        credits=float(row["credits"]),
                        capacity=int(row["capacity"]),
                        instructor_id=int(row["instructor_id"]),
                        department_id=int(department) if department else None,
                    )
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    raise InvalidDataError(str(e), path.name, row_number) from None

                if course.id in self._by_id:
                    raise InvalidDataError(
                        f"duplicate course id {course.id}", path.name, row_number
                    )
                self.courses.append(course)
                self._by_id[course.id] = course

    def get_course(self, course_id: int) -> Course | None:
        """Get a course by id."""
        return self._by_id.get(course_id)

    def get_codes(self) -> dict[int, str]:
        """Course id -> code."""
        return {course.id: course.code for course in self.courses}
