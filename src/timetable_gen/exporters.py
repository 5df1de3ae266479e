"""Export functionality for generated timetables."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from .scheduler.models import ScheduleResult


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output file or directory
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to JSON file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output JSON file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


def _summary_rows(result: ScheduleResult) -> list[dict]:
    stats = result.statistics
    return [
        {"metric": "timetable_id", "value": result.timetable_id},
        {"metric": "generation_date", "value": result.generation_date},
        {"metric": "seed", "value": "" if result.seed is None else result.seed},
        {"metric": "total_courses", "value": stats.total_courses},
        {"metric": "fully_placed", "value": stats.fully_placed},
        {"metric": "under_scheduled", "value": stats.under_scheduled},
        {"metric": "scheduled_classes", "value": result.total_scheduled},
        {"metric": "slots_requested", "value": stats.slots_requested},
        {"metric": "slots_achieved", "value": stats.slots_achieved},
        {"metric": "budget_exceeded", "value": len(result.budget_exceeded)},
        {"metric": "warnings", "value": len(result.warnings)},
    ]


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to CSV files.

        Creates three files:
        - scheduled_classes.csv: All output rows
        - diagnostics.csv: Under-scheduled courses
        - summary.csv: Overall summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(
            output_dir / "scheduled_classes.csv",
            [row.to_dict() for row in result.scheduled_classes],
        )
        self._write_csv(
            output_dir / "diagnostics.csv",
            [d.to_dict() for d in result.diagnostics],
        )
        self._write_csv(output_dir / "summary.csv", _summary_rows(result))

    def _write_csv(self, output_path: Path, rows: list[dict]) -> None:
        """Write rows to CSV file."""
        if not rows:
            return

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    SCHEDULE_COLUMNS = [
        "id",
        "courseId",
        "instructorId",
        "classroomId",
        "day",
        "startTime",
        "endTime",
        "timetableId",
    ]
    DIAGNOSTIC_COLUMNS = [
        "courseId",
        "courseCode",
        "slotsRequested",
        "slotsAchieved",
        "reason",
        "details",
    ]

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to Excel file.

        Creates workbook with sheets:
        - Schedule: All output rows
        - Diagnostics: Under-scheduled courses
        - Summary: Overall summary
        - Warnings: Reference warnings

        Args:
            result: ScheduleResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._frame(
                [row.to_dict() for row in result.scheduled_classes], self.SCHEDULE_COLUMNS
            ).to_excel(writer, sheet_name="Schedule", index=False)
            self._frame(
                [d.to_dict() for d in result.diagnostics], self.DIAGNOSTIC_COLUMNS
            ).to_excel(writer, sheet_name="Diagnostics", index=False)
            pd.DataFrame(_summary_rows(result)).to_excel(
                writer, sheet_name="Summary", index=False
            )
            self._frame(
                [{"warning": w} for w in result.warnings], ["warning"]
            ).to_excel(writer, sheet_name="Warnings", index=False)

    @staticmethod
    def _frame(rows: list[dict], columns: list[str]) -> pd.DataFrame:
        """DataFrame with fixed columns, also when there are no rows."""
        return pd.DataFrame(rows, columns=columns) if rows else pd.DataFrame(columns=columns)


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()
