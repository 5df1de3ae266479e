"""Excel weekly-grid workbook generator from schedule JSON data."""

from collections import defaultdict
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import time_to_minutes
from .exporter import load_schedule
from .models import ScheduledClass, TimeGrid

# Column widths
TIME_COLUMN_WIDTH = 14.0
DAY_COLUMN_WIDTH = 26.0
OVERVIEW_COLUMN_WIDTHS = {"A": 24.0, "B": 18.0, "C": 18.0, "D": 18.0, "E": 50.0}

# Fonts
FONT_TITLE = Font(name="Calibri", size=14, bold=True)
FONT_HEADER = Font(name="Calibri", size=11, bold=True)
FONT_TIME = Font(name="Calibri", size=10, bold=False)
FONT_CELL = Font(name="Calibri", size=10, bold=False)

# Alignments
ALIGN_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
ALIGN_LEFT = Alignment(horizontal="left", vertical="center", wrap_text=True)

# Borders
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

# Fill for header row and for cells holding more than one class
FILL_HEADER = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
FILL_CONFLICT = PatternFill(start_color="F8CBAD", end_color="F8CBAD", fill_type="solid")

# Excel limits sheet titles to 31 characters
MAX_SHEET_NAME_LENGTH = 31

HEADER_ROW = 3


class ScheduleExcelGenerator:
    """Generates a weekly grid workbook: one sheet per classroom."""

    def __init__(self, grid: TimeGrid, course_codes: dict[int, str] | None = None):
        """Initialize generator.

        Args:
            grid: Weekly grid the schedule was built on.
            course_codes: Optional course id -> code for readable cells.
        """
        self.grid = grid
        self.course_codes = course_codes or {}
        self._slot_starts = [time_to_minutes(start) for start, _ in grid.bounds]

    def slot_index_for(self, start_time: str) -> int | None:
        """Grid row a class starting at start_time belongs in.

        Returns the last slot starting at or before start_time, or None if the
        class starts before the first slot.
        """
        minutes = time_to_minutes(start_time)
        found = None
        for i, slot_start in enumerate(self._slot_starts):
            if slot_start <= minutes:
                found = i
        return found

    def build_schedule_grid(
        self, rows: list[ScheduledClass]
    ) -> dict[int, dict[tuple[str, int], list[ScheduledClass]]]:
        """Group rows as classroom -> (day, slot index) -> rows."""
        grid: dict[int, dict[tuple[str, int], list[ScheduledClass]]] = defaultdict(
            lambda: defaultdict(list)
        )
        for row in rows:
            slot_index = self.slot_index_for(row.start_time)
            if slot_index is None:
                continue
            grid[row.classroom_id][(row.day, slot_index)].append(row)
        return grid

    def format_cell_content(self, row: ScheduledClass) -> str:
        """Cell text: course, instructor, time range."""
        course = self.course_codes.get(row.course_id, f"Course {row.course_id}")
        return f"{course}\nInstructor {row.instructor_id}\n{row.start_time}-{row.end_time}"

    @staticmethod
    def sanitize_sheet_name(name: str) -> str:
        """Strip characters Excel forbids in sheet titles and truncate."""
        for char in "[]:*?/\\":
            name = name.replace(char, " ")
        return name[:MAX_SHEET_NAME_LENGTH].strip() or "Sheet"

    def create_workbook(self, data: dict) -> Workbook:
        """Create the workbook from loaded schedule data.

        Args:
            data: Schedule dictionary as returned by load_schedule.

        Returns:
            Populated Workbook object.
        """
        rows = [ScheduledClass.from_dict(r) for r in data.get("scheduled_classes", [])]

        wb = Workbook()
        wb.remove(wb.active)

        self.setup_overview(wb.create_sheet(title="Overview"), data, rows)

        schedule_grid = self.build_schedule_grid(rows)
        for classroom_id in sorted(schedule_grid):
            ws = wb.create_sheet(title=self.sanitize_sheet_name(f"Room {classroom_id}"))
            self.setup_grid(ws, f"Classroom {classroom_id}")
            self.fill_schedule(ws, schedule_grid[classroom_id])

        return wb

    def setup_overview(self, ws, data: dict, rows: list[ScheduledClass]) -> None:
        """Summary sheet: totals and under-scheduled courses."""
        for col, width in OVERVIEW_COLUMN_WIDTHS.items():
            ws.column_dimensions[col].width = width

        ws["A1"] = f"Timetable {data.get('timetable_id', '')}".strip()
        ws["A1"].font = FONT_TITLE

        ws["A3"] = "Scheduled classes"
        ws["B3"] = len(rows)
        ws["A4"] = "Under-scheduled courses"
        ws["B4"] = len(data.get("diagnostics", []))
        ws["A5"] = "Generated"
        ws["B5"] = data.get("generation_date", "")
        for row in range(3, 6):
            ws[f"A{row}"].font = FONT_HEADER

        diagnostics = data.get("diagnostics", [])
        if not diagnostics:
            return

        headers = ["Course", "Requested", "Achieved", "Reason", "Details"]
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=7, column=col, value=header)
            cell.font = FONT_HEADER
            cell.fill = FILL_HEADER
            cell.border = THIN_BORDER

        for offset, diagnostic in enumerate(diagnostics, start=8):
            values = [
                diagnostic.get("courseCode", ""),
                diagnostic.get("slotsRequested", 0),
                diagnostic.get("slotsAchieved", 0),
                diagnostic.get("reason", ""),
                diagnostic.get("details", ""),
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=offset, column=col, value=value)
                cell.border = THIN_BORDER
                cell.alignment = ALIGN_LEFT

    def setup_grid(self, ws, title: str) -> None:
        """Title, day header row and time labels with borders."""
        ws["A1"] = title
        ws["A1"].font = FONT_TITLE

        ws.column_dimensions["A"].width = TIME_COLUMN_WIDTH
        header = ws.cell(row=HEADER_ROW, column=1, value="Time")
        header.font = FONT_HEADER
        header.fill = FILL_HEADER
        header.alignment = ALIGN_CENTER
        header.border = THIN_BORDER

        for col, day in enumerate(self.grid.days, start=2):
            ws.column_dimensions[get_column_letter(col)].width = DAY_COLUMN_WIDTH
            cell = ws.cell(row=HEADER_ROW, column=col, value=day)
            cell.font = FONT_HEADER
            cell.fill = FILL_HEADER
            cell.alignment = ALIGN_CENTER
            cell.border = THIN_BORDER

        for i, label in enumerate(self.grid.time_slots):
            row = HEADER_ROW + 1 + i
            ws.row_dimensions[row].height = 48.0
            cell = ws.cell(row=row, column=1, value=label)
            cell.font = FONT_TIME
            cell.alignment = ALIGN_CENTER
            cell.border = THIN_BORDER

            for col in range(2, len(self.grid.days) + 2):
                cell = ws.cell(row=row, column=col)
                cell.border = THIN_BORDER
                cell.alignment = ALIGN_CENTER
                cell.font = FONT_CELL

        ws.freeze_panes = ws.cell(row=HEADER_ROW + 1, column=2)

    def fill_schedule(
        self, ws, cells: dict[tuple[str, int], list[ScheduledClass]]
    ) -> None:
        """Write rows into their (day, slot) cells; flag double bookings."""
        day_columns = {day: col for col, day in enumerate(self.grid.days, start=2)}

        for (day, slot_index), rows in cells.items():
            col = day_columns.get(day)
            if col is None:
                continue

            cell = ws.cell(row=HEADER_ROW + 1 + slot_index, column=col)
            cell.value = "\n\n".join(self.format_cell_content(r) for r in rows)
            if len(rows) > 1:
                cell.fill = FILL_CONFLICT

    def save(self, wb: Workbook, output_path: Path) -> None:
        """Save workbook to file.

        Args:
            wb: Workbook to save.
            output_path: Output file path.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)


def generate_schedule_excel(
    input_path: Path,
    output_path: Path,
    course_codes: dict[int, str] | None = None,
) -> Path:
    """Generate a weekly grid workbook from a schedule JSON file.

    Args:
        input_path: Path to schedule JSON file.
        output_path: Output .xlsx path.
        course_codes: Optional course id -> code for readable cells.

    Returns:
        Path of the generated workbook.
    """
    data = load_schedule(input_path)
    grid = TimeGrid.from_dict(data.get("grid", {}))

    generator = ScheduleExcelGenerator(grid, course_codes)
    wb = generator.create_workbook(data)
    generator.save(wb, output_path)
    return output_path
