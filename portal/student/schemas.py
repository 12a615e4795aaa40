"""Pydantic schemas for the student views.

Response models for:
- Dashboard (student summary, progress, assignments)
- Course view (units with enabled lessons and their status)
- Lesson detail (lesson with status, resources)

Fields serialize with camelCase aliases.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from portal.curriculum.models import Course, Lesson, Resource, Unit
from portal.enrollment.models import StudentEnrollment
from portal.progress.aggregator import UnitCompletion
from portal.progress.models import LessonProgressStatus, LessonStatusRecord


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==============================================================================
# Dashboard Schemas
# ==============================================================================


class StudentSummary(CamelModel):
    """Student summary shown on the dashboard."""

    id: UUID
    full_name: str
    email: str
    group: str = Field(description="Group code")
    course: str = Field(description="Course code")
    type: str
    status: str

    @classmethod
    def from_enrollment(cls, enrollment: StudentEnrollment) -> "StudentSummary":
        """Create summary from a student and their group and course."""
        student = enrollment.student
        return cls(
            id=student.id,
            full_name=student.full_name,
            email=student.email,
            group=enrollment.group.group_code,
            course=enrollment.course.course_code,
            type=student.type,
            status=student.status,
        )


class UnitProgressView(CamelModel):
    """Completion of one unit."""

    unit_id: UUID
    unit_code: str
    unit_name: str
    completion: float = Field(ge=0, le=100)

    @classmethod
    def from_completion(cls, item: UnitCompletion) -> "UnitProgressView":
        return cls(
            unit_id=item.unit_id,
            unit_code=item.unit_code,
            unit_name=item.unit_name,
            completion=item.completion,
        )


class ProgressView(CamelModel):
    """Overall and per-unit progress."""

    overall: float = Field(ge=0, le=100)
    by_unit: list[UnitProgressView]


class AssignmentsView(CamelModel):
    """Assignment counters.

    ``pending`` counts unsubmitted ASSIGNMENT resources; ``total`` counts
    ASSIGNMENT lessons.
    """

    pending: int = Field(ge=0)
    total: int = Field(ge=0)


class DashboardView(CamelModel):
    """Student dashboard."""

    student: StudentSummary
    progress: ProgressView
    assignments: AssignmentsView


# ==============================================================================
# Course View Schemas
# ==============================================================================


class CourseSummary(CamelModel):
    """Course header."""

    id: UUID
    course_code: str
    title: str
    type: str | None = None

    @classmethod
    def from_entity(cls, course: Course) -> "CourseSummary":
        return cls(
            id=course.id,
            course_code=course.course_code,
            title=course.title,
            type=course.type,
        )


class LessonStatusView(CamelModel):
    """Lesson with the student's status."""

    id: UUID
    title: str
    order: int
    status: LessonProgressStatus
    completed_at: datetime | None = None

    @classmethod
    def from_entity(
        cls, lesson: Lesson, record: LessonStatusRecord
    ) -> "LessonStatusView":
        return cls(
            id=lesson.id,
            title=lesson.title,
            order=lesson.order,
            status=LessonProgressStatus(record.status),
            completed_at=record.completed_at,
        )


class UnitView(CamelModel):
    """Unit with its completion and lessons."""

    id: UUID
    unit_code: str
    unit_name: str
    term: str | None = None
    nature: str | None = None
    completion: float = Field(ge=0, le=100)
    lessons: list[LessonStatusView]

    @classmethod
    def from_entity(
        cls, unit: Unit, completion: float, lessons: list[LessonStatusView]
    ) -> "UnitView":
        return cls(
            id=unit.id,
            unit_code=unit.unit_code,
            unit_name=unit.unit_name,
            term=unit.term,
            nature=unit.nature,
            completion=completion,
            lessons=lessons,
        )


class CourseView(CamelModel):
    """Student's course with units and enabled lessons."""

    course: CourseSummary
    units: list[UnitView]


# ==============================================================================
# Lesson Detail Schemas
# ==============================================================================


class LessonDetail(CamelModel):
    """Lesson with the student's status."""

    id: UUID
    title: str
    description: str | None = None
    order: int
    status: LessonProgressStatus


class ResourceView(CamelModel):
    """Lesson resource."""

    id: UUID
    type: str
    title: str
    url: str | None = None
    unit_id: UUID
    lesson_id: UUID | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, resource: Resource) -> "ResourceView":
        return cls(
            id=resource.id,
            type=resource.type,
            title=resource.title,
            url=resource.url,
            unit_id=resource.unit_id,
            lesson_id=resource.lesson_id,
            created_at=resource.created_at,
        )


class LessonView(CamelModel):
    """Lesson detail with its resources."""

    lesson: LessonDetail
    resources: list[ResourceView]
