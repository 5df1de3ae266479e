"""Export functions for schedule results."""

import json
from pathlib import Path

from ..exceptions import InvalidDataError
from .models import ScheduleResult


def export_schedule_json(result: ScheduleResult, output_path: Path | str) -> None:
    """Export schedule result to JSON file.

    Args:
        result: ScheduleResult to export
        output_path: Path to output JSON file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with open(output, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)


def load_schedule(input_path: Path | str) -> dict:
    """Load a schedule JSON file.

    Accepts either a full export ({"scheduled_classes": [...], ...}) or a bare
    list of rows, which is wrapped as {"scheduled_classes": rows}.

    Args:
        input_path: Path to schedule JSON file

    Returns:
        Dictionary with at least a "scheduled_classes" key

    Raises:
        InvalidDataError: If the file holds neither an object nor a list, or the
            rows are not a list
    """
    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        return {"scheduled_classes": data}
    if not isinstance(data, dict):
        raise InvalidDataError(
            "expected a schedule object or a list of rows", Path(input_path).name
        )
    data.setdefault("scheduled_classes", data.get("scheduledClasses", []))
    if not isinstance(data["scheduled_classes"], list):
        raise InvalidDataError("scheduled_classes must be a list", Path(input_path).name)
    return data
