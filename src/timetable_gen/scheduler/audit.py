"""Conflict auditing for finished timetables."""

from collections import defaultdict
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from ..exceptions import InvalidTimeSlotError
from .constants import time_to_minutes
from .models import ConflictGroup, ConflictReport, InvalidRow, ScheduledClass


class AuditMode(str, Enum):
    """How rows are compared in time."""

    # Same (day, start, end) only
    EXACT = "exact"
    # Any overlap of [start, end) on the same day
    OVERLAP = "overlap"


def audit_conflicts(
    scheduled_classes: Iterable[ScheduledClass | dict[str, Any]],
    mode: AuditMode = AuditMode.EXACT,
) -> ConflictReport:
    """Scan a finished schedule for double-booked instructors and classrooms.

    In EXACT mode rows are grouped by (day, start_time, end_time) and any
    instructor or classroom appearing more than once in a group is reported.
    Blocks of different lengths that only partially overlap are not detected
    in this mode; use OVERLAP to compare time intervals instead.

    Student conflicts need enrollment data that is not modeled, so
    `student_conflicts` is always empty (see `student_conflicts_note`).

    Rows that are missing fields or carry times other than HH:MM are left out
    of both checks and listed in `invalid_rows`; the auditor never raises on
    a malformed schedule.

    Args:
        scheduled_classes: Rows as ScheduledClass objects or wire dictionaries
        mode: EXACT (default) or OVERLAP

    Returns:
        ConflictReport; empty lists for an empty schedule
    """
    rows, invalid_rows = _read_rows(scheduled_classes)

    if mode == AuditMode.OVERLAP:
        find = _overlap_groups
    else:
        find = _exact_groups

    return ConflictReport(
        instructor_conflicts=find(rows, "instructor", lambda r: r.instructor_id),
        classroom_conflicts=find(rows, "classroom", lambda r: r.classroom_id),
        invalid_rows=invalid_rows,
    )


def _read_rows(
    scheduled_classes: Iterable[ScheduledClass | dict[str, Any]],
) -> tuple[list[ScheduledClass], list[InvalidRow]]:
    """Split input into comparable rows and rows that can't be audited."""
    rows: list[ScheduledClass] = []
    invalid: list[InvalidRow] = []

    for position, item in enumerate(scheduled_classes):
        try:
            if isinstance(item, ScheduledClass):
                row = item
            elif isinstance(item, dict):
                row = ScheduledClass.from_dict(item)
            else:
                raise TypeError(f"expected an object, got {type(item).__name__}")

            start = time_to_minutes(row.start_time)
            end = time_to_minutes(row.end_time)
        except KeyError as e:
            invalid.append(InvalidRow(position, f"missing field {e}"))
            continue
        except (TypeError, ValueError, AttributeError, InvalidTimeSlotError) as e:
            invalid.append(InvalidRow(position, str(e)))
            continue

        if end <= start:
            invalid.append(
                InvalidRow(position, f"ends at {row.end_time}, not after {row.start_time}")
            )
            continue
        rows.append(row)

    return rows, invalid


def _exact_groups(
    rows: list[ScheduledClass],
    kind: str,
    entity_of: Callable[[ScheduledClass], int],
) -> list[ConflictGroup]:
    """Group by (entity, day, start, end); report buckets with 2+ rows."""
    buckets: dict[tuple[int, str, str, str], list[ScheduledClass]] = defaultdict(list)
    for row in rows:
        buckets[(entity_of(row), *row.time_key)].append(row)

    return [
        ConflictGroup(
            kind=kind,
            entity_id=entity_id,
            day=day,
            start_time=start,
            end_time=end,
            classes=classes,
        )
        for (entity_id, day, start, end), classes in buckets.items()
        if len(classes) > 1
    ]


def _overlap_groups(
    rows: list[ScheduledClass],
    kind: str,
    entity_of: Callable[[ScheduledClass], int],
) -> list[ConflictGroup]:
    """Cluster overlapping intervals per (entity, day); report clusters of 2+."""
    by_entity_day: dict[tuple[int, str], list[ScheduledClass]] = defaultdict(list)
    for row in rows:
        by_entity_day[(entity_of(row), row.day)].append(row)

    groups: list[ConflictGroup] = []
    for (entity_id, day), entity_rows in by_entity_day.items():
        if len(entity_rows) < 2:
            continue

        ordered = sorted(
            entity_rows,
            key=lambda r: (time_to_minutes(r.start_time), time_to_minutes(r.end_time)),
        )
        cluster = [ordered[0]]
        cluster_end = time_to_minutes(ordered[0].end_time)

        for row in ordered[1:]:
            if time_to_minutes(row.start_time) < cluster_end:
                cluster.append(row)
                cluster_end = max(cluster_end, time_to_minutes(row.end_time))
                continue
            if len(cluster) > 1:
                groups.append(_span_group(kind, entity_id, day, cluster))
            cluster = [row]
            cluster_end = time_to_minutes(row.end_time)

        if len(cluster) > 1:
            groups.append(_span_group(kind, entity_id, day, cluster))

    return groups


def _span_group(
    kind: str, entity_id: int, day: str, cluster: list[ScheduledClass]
) -> ConflictGroup:
    end = max(cluster, key=lambda r: time_to_minutes(r.end_time)).end_time
    return ConflictGroup(
        kind=kind,
        entity_id=entity_id,
        day=day,
        start_time=cluster[0].start_time,
        end_time=end,
        classes=list(cluster),
    )
