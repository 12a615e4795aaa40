"""Database models for course structure.

Cassandra table definitions for:
- Courses: course catalogue with a code lookup
- Units: ordered per course, plus a unit -> course lookup
- Lessons: ordered per unit, plus a lesson -> unit lookup
- Resources: attachments per lesson and per unit
- Submissions: resources submitted by each student

Architecture: denormalised lookup tables so that every read is a single
partition query.
"""

from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple
from uuid import UUID, uuid4

from portal.utils.dates import ensure_utc_aware, utc_now


class LessonType(str, Enum):
    """Lesson content type."""

    LECTURE = "LECTURE"
    READING = "READING"
    ASSIGNMENT = "ASSIGNMENT"
    QUIZ = "QUIZ"


class ResourceType(str, Enum):
    """Resource (attachment) type."""

    ASSIGNMENT = "ASSIGNMENT"
    DOCUMENT = "DOCUMENT"
    LINK = "LINK"
    VIDEO = "VIDEO"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id UUID PRIMARY KEY,
    course_code TEXT,
    title TEXT,
    type TEXT
)
"""

COURSES_BY_CODE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses_by_code (
    course_code TEXT PRIMARY KEY,
    course_id UUID
)
"""

# Units of a course in storage order
UNITS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.units_by_course (
    course_id UUID,
    position INT,
    unit_id UUID,
    unit_code TEXT,
    unit_name TEXT,
    term TEXT,
    nature TEXT,
    PRIMARY KEY (course_id, position, unit_id)
) WITH CLUSTERING ORDER BY (position ASC, unit_id ASC)
"""

UNIT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.units (
    id UUID PRIMARY KEY,
    course_id UUID,
    unit_code TEXT,
    unit_name TEXT,
    term TEXT,
    nature TEXT,
    position INT
)
"""

# "order" is reserved in CQL, hence lesson_order
LESSONS_BY_UNIT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons_by_unit (
    unit_id UUID,
    lesson_order INT,
    lesson_id UUID,
    title TEXT,
    description TEXT,
    enabled BOOLEAN,
    type TEXT,
    PRIMARY KEY (unit_id, lesson_order, lesson_id)
) WITH CLUSTERING ORDER BY (lesson_order ASC, lesson_id ASC)
"""

LESSON_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons (
    id UUID PRIMARY KEY,
    unit_id UUID,
    title TEXT,
    description TEXT,
    lesson_order INT,
    enabled BOOLEAN,
    type TEXT
)
"""

RESOURCES_BY_LESSON_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.resources_by_lesson (
    lesson_id UUID,
    resource_id UUID,
    unit_id UUID,
    type TEXT,
    title TEXT,
    url TEXT,
    created_at TIMESTAMP,
    PRIMARY KEY (lesson_id, resource_id)
)
"""

RESOURCES_BY_UNIT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.resources_by_unit (
    unit_id UUID,
    resource_id UUID,
    lesson_id UUID,
    type TEXT,
    title TEXT,
    url TEXT,
    created_at TIMESTAMP,
    PRIMARY KEY (unit_id, resource_id)
)
"""

SUBMISSIONS_BY_STUDENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.submissions_by_student (
    student_id UUID,
    resource_id UUID,
    submitted_at TIMESTAMP,
    PRIMARY KEY (student_id, resource_id)
)
"""

CURRICULUM_TABLES_CQL = [
    COURSE_TABLE_CQL,
    COURSES_BY_CODE_TABLE_CQL,
    UNITS_BY_COURSE_TABLE_CQL,
    UNIT_TABLE_CQL,
    LESSONS_BY_UNIT_TABLE_CQL,
    LESSON_TABLE_CQL,
    RESOURCES_BY_LESSON_TABLE_CQL,
    RESOURCES_BY_UNIT_TABLE_CQL,
    SUBMISSIONS_BY_STUDENT_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Resource:
    """Attachment tied to a lesson and its unit.

    Attributes:
        id: Resource UUID
        unit_id: Owning unit UUID
        lesson_id: Owning lesson UUID (None for unit-level resources)
        type: Resource type (ASSIGNMENT, DOCUMENT, LINK, VIDEO)
        title: Display title
        url: Location of the artifact
        created_at: Creation timestamp
    """

    def __init__(
        self,
        unit_id: UUID,
        id: UUID | None = None,
        lesson_id: UUID | None = None,
        type: str = ResourceType.DOCUMENT.value,
        title: str = "",
        url: str | None = None,
        created_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.unit_id = unit_id
        self.lesson_id = lesson_id
        self.type = type
        self.title = title
        self.url = url
        self.created_at = ensure_utc_aware(created_at) or utc_now()

    @property
    def is_assignment(self) -> bool:
        """Check if the resource is an assignment to be submitted."""
        return self.type == ResourceType.ASSIGNMENT.value

    @classmethod
    def from_row(cls, row: Any) -> "Resource":
        """Create Resource from a resources_by_lesson/resources_by_unit row.

        A null created_at stays None.
        """
        resource = cls(
            id=row.resource_id,
            unit_id=row.unit_id,
            lesson_id=row.lesson_id,
            type=row.type or ResourceType.DOCUMENT.value,
            title=row.title or "",
            url=row.url,
        )
        resource.created_at = ensure_utc_aware(row.created_at)
        return resource

    def __repr__(self) -> str:
        return f"<Resource {self.id} {self.type} lesson={self.lesson_id}>"


class Lesson:
    """Ordered content item within a unit."""

    def __init__(
        self,
        unit_id: UUID,
        id: UUID | None = None,
        title: str = "",
        description: str | None = None,
        order: int = 0,
        enabled: bool = True,
        type: str = LessonType.LECTURE.value,
        resources: list[Resource] | None = None,
    ):
        self.id = id or uuid4()
        self.unit_id = unit_id
        self.title = title
        self.description = description
        self.order = order
        self.enabled = enabled
        self.type = type
        self.resources = resources or []

    @property
    def is_assignment(self) -> bool:
        """Check if the lesson itself is an assignment."""
        return self.type == LessonType.ASSIGNMENT.value

    @classmethod
    def from_row(cls, row: Any) -> "Lesson":
        """Create Lesson from a lessons or lessons_by_unit row."""
        lesson_id = getattr(row, "lesson_id", None) or row.id
        return cls(
            id=lesson_id,
            unit_id=row.unit_id,
            title=row.title or "",
            description=row.description,
            order=row.lesson_order or 0,
            enabled=row.enabled if row.enabled is not None else True,
            type=row.type or LessonType.LECTURE.value,
        )

    def __repr__(self) -> str:
        return f"<Lesson {self.id} #{self.order} enabled={self.enabled}>"


class Unit:
    """Course subdivision containing ordered lessons."""

    def __init__(
        self,
        course_id: UUID,
        id: UUID | None = None,
        unit_code: str = "",
        unit_name: str = "",
        term: str | None = None,
        nature: str | None = None,
        position: int = 0,
        lessons: list[Lesson] | None = None,
    ):
        self.id = id or uuid4()
        self.course_id = course_id
        self.unit_code = unit_code
        self.unit_name = unit_name
        self.term = term
        self.nature = nature
        self.position = position
        self.lessons = lessons or []

    @classmethod
    def from_row(cls, row: Any) -> "Unit":
        """Create Unit from a units or units_by_course row."""
        unit_id = getattr(row, "unit_id", None) or row.id
        return cls(
            id=unit_id,
            course_id=row.course_id,
            unit_code=row.unit_code or "",
            unit_name=row.unit_name or "",
            term=row.term,
            nature=row.nature,
            position=row.position or 0,
        )

    def __repr__(self) -> str:
        return f"<Unit {self.unit_code} lessons={len(self.lessons)}>"


class Course:
    """Course with its ordered units.

    ``units`` is only populated when the full structure has been loaded.
    """

    def __init__(
        self,
        id: UUID | None = None,
        course_code: str = "",
        title: str = "",
        type: str | None = None,
        units: list[Unit] | None = None,
    ):
        self.id = id or uuid4()
        self.course_code = course_code
        self.title = title
        self.type = type
        self.units = units or []

    @property
    def unit_ids(self) -> list[UUID]:
        """IDs of the course units, in course order."""
        return [unit.id for unit in self.units]

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course from a courses row."""
        return cls(
            id=row.id,
            course_code=row.course_code or "",
            title=row.title or "",
            type=row.type,
        )

    def __repr__(self) -> str:
        return f"<Course {self.course_code} units={len(self.units)}>"


class LessonAccessPath(NamedTuple):
    """A lesson resolved up to the groups that may view it.

    ``accessible_group_ids`` holds only the groups linked to the lesson's
    course that contain the querying student.
    """

    lesson: Lesson
    course_id: UUID
    accessible_group_ids: list[UUID]
