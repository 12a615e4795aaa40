"""Course structure module.

Provides:
- Courses, units, lessons and resources
- Assignment submissions
- Lesson access path resolution
"""

from .models import (
    CURRICULUM_TABLES_CQL,
    Course,
    Lesson,
    LessonAccessPath,
    LessonType,
    Resource,
    ResourceType,
    Unit,
)


__all__ = [
    "CURRICULUM_TABLES_CQL",
    "Course",
    "Lesson",
    "LessonAccessPath",
    "LessonType",
    "Resource",
    "ResourceType",
    "Unit",
]
