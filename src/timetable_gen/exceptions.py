"""Custom exceptions for the timetable generator."""


class TimetableError(Exception):
    """Base exception for timetable generator errors."""

    pass


class InvalidConstraintError(TimetableError):
    """One or more constraint records could not be parsed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        if len(errors) == 1:
            message = f"Invalid constraint: {errors[0]}"
        else:
            message = f"{len(errors)} invalid constraints:\n" + "\n".join(
                f"  - {error}" for error in errors
            )
        super().__init__(message)


class InvalidTimeSlotError(TimetableError):
    """Time slot label doesn't follow the 'HH:MM-HH:MM' format."""

    def __init__(self, label: str, reason: str | None = None):
        self.label = label
        message = f"Invalid time slot '{label}'"
        if reason:
            message += f": {reason}"
        else:
            message += ". Expected format 'HH:MM-HH:MM'"
        super().__init__(message)


class InvalidGridError(TimetableError):
    """Weekly grid definition is unusable."""

    pass


class InvalidDataError(TimetableError):
    """Input entity validation failed."""

    def __init__(self, message: str, file_name: str | None = None, row: int | None = None):
        self.file_name = file_name
        self.row = row
        location = ""
        if file_name:
            location += f" in '{file_name}'"
        if row is not None:
            location += f" at row {row}"
        super().__init__(f"Invalid data{location}: {message}")


class InputFileError(TimetableError):
    """Required input file is missing."""

    def __init__(self, path: str, available_files: list[str] | None = None):
        self.path = path
        self.available_files = available_files or []
        message = f"Input file not found: {path}"
        if self.available_files:
            message += f". Available files: {', '.join(self.available_files)}"
        super().__init__(message)
