"""Lesson access gate.

A student may view a lesson only when the course owning the lesson's unit
is linked to the student's group. A missing lesson and a denied one look
the same to callers.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from portal.curriculum.models import LessonAccessPath


if TYPE_CHECKING:
    from portal.curriculum.store import CurriculumStore

logger = structlog.get_logger(__name__)


class AccessGate:
    """Group-membership check for lesson access."""

    def __init__(self, curriculum_store: "CurriculumStore"):
        self.curriculum_store = curriculum_store

    async def resolve_lesson(
        self, student_id: UUID, lesson_id: UUID
    ) -> LessonAccessPath | None:
        """Resolve the lesson if the student may view it.

        Returns:
            The access path, or None when the lesson does not exist or no
            group linked to its course contains the student.
        """
        path = await self.curriculum_store.resolve_lesson_access_path(
            lesson_id, student_id
        )
        if path is None:
            logger.info(
                "lesson_not_found",
                student_id=str(student_id),
                lesson_id=str(lesson_id),
            )
            return None

        if not path.accessible_group_ids:
            logger.warning(
                "lesson_access_denied",
                student_id=str(student_id),
                lesson_id=str(lesson_id),
                course_id=str(path.course_id),
            )
            return None

        return path

    async def can_access_lesson(self, student_id: UUID, lesson_id: UUID) -> bool:
        """Check if the student may view the lesson."""
        return await self.resolve_lesson(student_id, lesson_id) is not None
