"""Student enrollment module.

Provides:
- Student accounts with their group and course
- Groups and course-group links
"""

from .models import (
    ENROLLMENT_TABLES_CQL,
    Group,
    Student,
    StudentEnrollment,
    StudentStatus,
)


__all__ = [
    "ENROLLMENT_TABLES_CQL",
    "Group",
    "Student",
    "StudentEnrollment",
    "StudentStatus",
]
