"""Student progress module.

Provides:
- Per-unit completion and per-lesson status records
- Progress aggregation over a course
"""

from .models import (
    COMPLETE,
    PROGRESS_TABLES_CQL,
    LessonProgressStatus,
    LessonStatusRecord,
    Progress,
)


__all__ = [
    "COMPLETE",
    "PROGRESS_TABLES_CQL",
    "LessonProgressStatus",
    "LessonStatusRecord",
    "Progress",
]
