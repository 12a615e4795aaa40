"""Progress aggregation over a course structure.

Pure functions: they take an already-loaded ``Course`` and the student's
``Progress`` records and never touch a store. Records that break the
one-record-per-course-unit invariant are logged and skipped.
"""

from collections.abc import Iterable
from typing import NamedTuple
from uuid import UUID

import structlog

from portal.core.exceptions import InvariantViolationError
from portal.curriculum.models import Course
from portal.progress.models import COMPLETE, LessonStatusRecord, Progress


logger = structlog.get_logger(__name__)


class UnitCompletion(NamedTuple):
    """Completion of one course unit."""

    unit_id: UUID
    unit_code: str
    unit_name: str
    completion: float


class ProgressSummary(NamedTuple):
    """Aggregated progress of a student in a course."""

    overall: float
    by_unit: list[UnitCompletion]
    total_assignments: int


def _check_record(
    record: Progress, unit_ids: set[UUID], seen: set[UUID]
) -> None:
    if record.unit_id not in unit_ids:
        raise InvariantViolationError(
            f"Progress record for unit {record.unit_id} outside the course"
        )
    if record.unit_id in seen:
        raise InvariantViolationError(
            f"Duplicate progress record for unit {record.unit_id}"
        )
    if not 0 <= record.completion <= COMPLETE:
        raise InvariantViolationError(
            f"Completion {record.completion} out of range for unit {record.unit_id}"
        )


def index_progress(course: Course, records: Iterable[Progress]) -> dict[UUID, Progress]:
    """Map unit id to the student's progress record for that unit.

    Records for units outside the course, duplicates for a unit and
    completions outside [0, 100] are skipped; the first valid record for a
    unit wins.
    """
    unit_ids = set(course.unit_ids)
    indexed: dict[UUID, Progress] = {}

    for record in records:
        try:
            _check_record(record, unit_ids, set(indexed))
        except InvariantViolationError as e:
            logger.warning(
                "progress_invariant_violation",
                student_id=str(record.student_id),
                unit_id=str(record.unit_id),
                course_id=str(course.id),
                reason=e.message,
            )
            continue
        indexed[record.unit_id] = record

    return indexed


def progress_for_unit(
    indexed: dict[UUID, Progress], student_id: UUID, unit_id: UUID
) -> Progress:
    """Stored record for the unit, or an empty one when none exists."""
    return indexed.get(unit_id) or Progress.empty(student_id, unit_id)


def lesson_status(progress: Progress, lesson_id: UUID) -> LessonStatusRecord:
    """First lesson record with a known status, NOT_STARTED if none.

    Records with an unknown status are logged and skipped.
    """
    for record in progress.lessons:
        if record.lesson_id != lesson_id:
            continue
        if record.has_known_status:
            return record
        logger.warning(
            "progress_invariant_violation",
            student_id=str(progress.student_id),
            unit_id=str(progress.unit_id),
            lesson_id=str(lesson_id),
            reason=f"Unknown lesson status {record.status!r}",
        )
    return LessonStatusRecord.not_started(lesson_id)


def overall_progress(course: Course, indexed: dict[UUID, Progress]) -> float:
    """Percentage of course units completed.

    0 when the course has no units.
    """
    if not course.units:
        return 0.0

    completed = sum(
        1
        for unit in course.units
        if unit.id in indexed and indexed[unit.id].completion == COMPLETE
    )
    return completed / len(course.units) * 100


def unit_completions(
    course: Course, indexed: dict[UUID, Progress]
) -> list[UnitCompletion]:
    """Completion of every course unit in course order, 0 when no record."""
    return [
        UnitCompletion(
            unit_id=unit.id,
            unit_code=unit.unit_code,
            unit_name=unit.unit_name,
            completion=indexed[unit.id].completion if unit.id in indexed else 0.0,
        )
        for unit in course.units
    ]


def total_assignments(course: Course) -> int:
    """Count ASSIGNMENT-typed lessons across all units, enabled or not."""
    return sum(
        1 for unit in course.units for lesson in unit.lessons if lesson.is_assignment
    )


def summarize(course: Course, records: Iterable[Progress]) -> ProgressSummary:
    """Aggregate a student's progress records over a course."""
    indexed = index_progress(course, records)
    return ProgressSummary(
        overall=overall_progress(course, indexed),
        by_unit=unit_completions(course, indexed),
        total_assignments=total_assignments(course),
    )
