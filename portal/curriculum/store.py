"""Curriculum store: course structure, resources and submissions.

``CurriculumStore`` is the read contract the core depends on;
``CassandraCurriculumStore`` is the production implementation.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

import structlog

from portal.core.database import CassandraStore
from portal.curriculum.models import Course, Lesson, LessonAccessPath, Resource, Unit


if TYPE_CHECKING:
    from portal.enrollment.store import EnrollmentStore

logger = structlog.get_logger(__name__)


class CurriculumStore(Protocol):
    """Read contract for course structure."""

    async def get_course_structure(
        self, course_id: UUID, enabled_only: bool = False
    ) -> Course | None: ...

    async def count_pending_assignments(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> int: ...

    async def resolve_lesson_access_path(
        self, lesson_id: UUID, student_id: UUID
    ) -> LessonAccessPath | None: ...


def count_unsubmitted(
    resources: Iterable[Resource], submitted_resource_ids: set[UUID]
) -> int:
    """Count ASSIGNMENT resources with no submission (anti-join)."""
    return sum(
        1
        for resource in resources
        if resource.is_assignment and resource.id not in submitted_resource_ids
    )


class CassandraCurriculumStore(CassandraStore):
    """Curriculum store backed by Cassandra.

    Group membership for access resolution comes from the enrollment store.
    """

    def __init__(self, session, keyspace: str, enrollment_store: "EnrollmentStore"):
        """Initialize with Cassandra session and enrollment store."""
        self.enrollment_store = enrollment_store
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._get_course_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._get_units_by_course = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.units_by_course WHERE course_id = ?"
        )
        self._get_unit_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.units WHERE id = ?"
        )
        self._get_lessons_by_unit = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.lessons_by_unit WHERE unit_id = ?"
        )
        self._get_lesson_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.lessons WHERE id = ?"
        )
        self._get_resources_by_lesson = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.resources_by_lesson WHERE lesson_id = ?"
        )
        self._get_resources_by_unit = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.resources_by_unit WHERE unit_id = ?"
        )
        self._get_submissions_by_student = self.session.prepare(f"""
            SELECT resource_id FROM {self.keyspace}.submissions_by_student
            WHERE student_id = ?
        """)

    # ==========================================================================
    # Course structure
    # ==========================================================================

    async def get_course_structure(
        self, course_id: UUID, enabled_only: bool = False
    ) -> Course | None:
        """Load a course with units, lessons and lesson resources.

        Args:
            course_id: Course UUID
            enabled_only: Drop lessons whose ``enabled`` flag is false

        Returns:
            Course with units in storage order and lessons ascending by
            ``order``, or None if the course does not exist.
        """
        result = await self._execute(self._get_course_by_id, [course_id])
        row = result.one()
        if not row:
            return None

        course = Course.from_row(row)
        unit_rows = await self._execute(self._get_units_by_course, [course_id])
        course.units = [Unit.from_row(unit_row) for unit_row in unit_rows]

        for unit in course.units:
            unit.lessons = await self._get_unit_lessons(unit.id, enabled_only)

        return course

    async def _get_unit_lessons(self, unit_id: UUID, enabled_only: bool) -> list[Lesson]:
        rows = await self._execute(self._get_lessons_by_unit, [unit_id])
        lessons = [Lesson.from_row(row) for row in rows]
        if enabled_only:
            lessons = [lesson for lesson in lessons if lesson.enabled]

        resources = await self._get_unit_resources(unit_id)
        for lesson in lessons:
            lesson.resources = [r for r in resources if r.lesson_id == lesson.id]

        return sorted(lessons, key=lambda lesson: lesson.order)

    async def _get_unit_resources(self, unit_id: UUID) -> list[Resource]:
        rows = await self._execute(self._get_resources_by_unit, [unit_id])
        return [Resource.from_row(row) for row in rows]

    # ==========================================================================
    # Assignments
    # ==========================================================================

    async def count_pending_assignments(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> int:
        """Count ASSIGNMENT resources in the units not yet submitted by the student."""
        resources: list[Resource] = []
        for unit_id in unit_ids:
            resources.extend(await self._get_unit_resources(unit_id))

        if not resources:
            return 0

        rows = await self._execute(self._get_submissions_by_student, [student_id])
        submitted = {row.resource_id for row in rows}
        return count_unsubmitted(resources, submitted)

    # ==========================================================================
    # Access path
    # ==========================================================================

    async def resolve_lesson_access_path(
        self, lesson_id: UUID, student_id: UUID
    ) -> LessonAccessPath | None:
        """Resolve lesson -> unit -> course -> groups containing the student.

        Returns None if the lesson (or its unit) does not exist.
        """
        result = await self._execute(self._get_lesson_by_id, [lesson_id])
        row = result.one()
        if not row:
            return None

        lesson = Lesson.from_row(row)

        result = await self._execute(self._get_unit_by_id, [lesson.unit_id])
        unit_row = result.one()
        if not unit_row:
            logger.warning(
                "lesson_unit_missing",
                lesson_id=str(lesson_id),
                unit_id=str(lesson.unit_id),
            )
            return None

        rows = await self._execute(self._get_resources_by_lesson, [lesson_id])
        lesson.resources = [Resource.from_row(resource_row) for resource_row in rows]

        course_id = unit_row.course_id
        student = await self.enrollment_store.get_student(student_id)
        course_groups = await self.enrollment_store.get_course_group_ids(course_id)
        accessible = [
            group_id
            for group_id in course_groups
            if student is not None and group_id == student.group_id
        ]

        return LessonAccessPath(
            lesson=lesson,
            course_id=course_id,
            accessible_group_ids=accessible,
        )
