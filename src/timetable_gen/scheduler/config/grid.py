"""Weekly grid configuration loader."""

import json
from pathlib import Path

from ..models import TimeGrid


def load_grid(path: Path | None = None) -> TimeGrid:
    """Load the weekly grid from grid.json.

    Expected format: {"days": [...], "time_slots": ["09:00-09:50", ...]}.
    Missing keys (or a missing file) fall back to the default grid.

    Raises:
        InvalidTimeSlotError: If a time slot label is malformed
        InvalidGridError: If days or time slots are empty or duplicated
    """
    if path is None or not path.exists():
        return TimeGrid()

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return TimeGrid.from_dict(data)
