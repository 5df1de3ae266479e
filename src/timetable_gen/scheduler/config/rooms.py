"""Classroom configuration loader."""

import csv
from pathlib import Path

from ...exceptions import InvalidDataError
from ..models import Classroom


class RoomConfig:
    """Loader for classrooms from classrooms.csv (id, name, capacity)."""

    def __init__(self, classrooms_path: Path | None = None):
        self.classrooms: list[Classroom] = []
        self._by_id: dict[int, Classroom] = {}

        if classrooms_path and classrooms_path.exists():
            self._load(classrooms_path)

    def _load(self, path: Path) -> None:
        """Load classrooms from CSV file."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            # Row 1 is the header
            for row_number, row in enumerate(reader, start=2):
                try:
                    room = Classroom(
                        id=int(row["id"]),
                        capacity=int(row["capacity"]),
                        name=(row.get("name") or "").strip(),
                    )
                except (KeyError, TypeError, ValueError) as e:
                    raise InvalidDataError(str(e), path.name, row_number) from None

                if room.id in self._by_id:
                    raise InvalidDataError(
                        f"duplicate classroom id {room.id}", path.name, row_number
                    )
                self.classrooms.append(room)
                self._by_id[room.id] = room

    def get_classroom(self, classroom_id: int) -> Classroom | None:
        """Get a classroom by id."""
        return self._by_id.get(classroom_id)

    def get_all_classrooms(self) -> list[Classroom]:
        """Get all classrooms."""
        return self.classrooms

    def get_rooms_by_capacity(self, min_capacity: int) -> list[Classroom]:
        """Get classrooms with at least the given capacity."""
        return [r for r in self.classrooms if r.capacity >= min_capacity]
