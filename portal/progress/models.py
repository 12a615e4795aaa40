"""Database models for student progress.

Cassandra table definitions for:
- Unit progress: one completion record per (student, unit)
- Lesson progress: per-lesson status within a unit

A missing record is never an error: lookups fall back to a
default-constructed record (completion 0, NOT_STARTED).
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from portal.utils.dates import ensure_utc_aware, utc_now


class LessonProgressStatus(str, Enum):
    """Lesson progress status."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


# Completion value of a finished unit
COMPLETE = 100.0


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# Partition per student so the dashboard reads all units in one query
UNIT_PROGRESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.unit_progress (
    student_id UUID,
    unit_id UUID,
    completion DOUBLE,
    created_at TIMESTAMP,
    updated_at TIMESTAMP,
    PRIMARY KEY (student_id, unit_id)
)
"""

LESSON_PROGRESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lesson_progress (
    student_id UUID,
    unit_id UUID,
    lesson_id UUID,
    status TEXT,
    completed_at TIMESTAMP,
    updated_at TIMESTAMP,
    PRIMARY KEY ((student_id, unit_id), lesson_id)
) WITH CLUSTERING ORDER BY (lesson_id ASC)
"""

PROGRESS_TABLES_CQL = [
    UNIT_PROGRESS_TABLE_CQL,
    LESSON_PROGRESS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class LessonStatusRecord:
    """Status of one lesson for one student."""

    def __init__(
        self,
        lesson_id: UUID,
        status: str = LessonProgressStatus.NOT_STARTED.value,
        completed_at: datetime | None = None,
    ):
        self.lesson_id = lesson_id
        self.status = status
        self.completed_at = ensure_utc_aware(completed_at)

    @property
    def has_known_status(self) -> bool:
        """Check if the stored status is a LessonProgressStatus value."""
        return self.status in {s.value for s in LessonProgressStatus}

    @classmethod
    def not_started(cls, lesson_id: UUID) -> "LessonStatusRecord":
        """Default record for a lesson the student never touched."""
        return cls(lesson_id=lesson_id)

    @classmethod
    def from_row(cls, row: Any) -> "LessonStatusRecord":
        """Create record from a lesson_progress row."""
        return cls(
            lesson_id=row.lesson_id,
            status=row.status or LessonProgressStatus.NOT_STARTED.value,
            completed_at=row.completed_at,
        )

    def __repr__(self) -> str:
        return f"<LessonStatusRecord lesson={self.lesson_id} {self.status}>"


class Progress:
    """Completion of one unit by one student.

    Attributes:
        student_id: Student UUID
        unit_id: Unit UUID
        completion: Percentage in [0, 100]
        lessons: Per-lesson status records, ordered by lesson id
        created_at: Creation timestamp (registration)
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        student_id: UUID,
        unit_id: UUID,
        completion: float = 0.0,
        lessons: list[LessonStatusRecord] | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.student_id = student_id
        self.unit_id = unit_id
        self.completion = completion
        self.lessons = lessons or []
        self.created_at = ensure_utc_aware(created_at) or utc_now()
        self.updated_at = ensure_utc_aware(updated_at)

    @property
    def is_completed(self) -> bool:
        """Check if the unit is fully completed."""
        return self.completion == COMPLETE

    @classmethod
    def empty(cls, student_id: UUID, unit_id: UUID) -> "Progress":
        """Default record used when none is stored for the unit."""
        return cls(student_id=student_id, unit_id=unit_id)

    def lesson_status(self, lesson_id: UUID) -> LessonStatusRecord:
        """First status record for the lesson, NOT_STARTED if none."""
        for record in self.lessons:
            if record.lesson_id == lesson_id:
                return record
        return LessonStatusRecord.not_started(lesson_id)

    @classmethod
    def from_row(
        cls, row: Any, lessons: list[LessonStatusRecord] | None = None
    ) -> "Progress":
        """Create Progress from a unit_progress row and its lesson records."""
        return cls(
            student_id=row.student_id,
            unit_id=row.unit_id,
            completion=float(row.completion or 0),
            lessons=lessons,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Progress student={self.student_id} unit={self.unit_id} {self.completion}%>"
