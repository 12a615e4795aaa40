"""Student view service layer.

Business logic for:
- Dashboard: student summary, overall/per-unit progress, assignments
- Course view: units with enabled lessons and per-lesson status
- Lesson detail: access-gated lesson with status and resources
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from portal.core.exceptions import PortalError
from portal.progress import aggregator
from portal.progress.models import Progress

from .access import AccessGate
from .schemas import (
    AssignmentsView,
    CourseSummary,
    CourseView,
    DashboardView,
    LessonDetail,
    LessonStatusView,
    LessonView,
    ProgressView,
    ResourceView,
    StudentSummary,
    UnitProgressView,
    UnitView,
)


if TYPE_CHECKING:
    from portal.curriculum.store import CurriculumStore
    from portal.enrollment.store import EnrollmentStore
    from portal.progress.store import ProgressStore

logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class StudentViewError(PortalError):
    """Base student view error."""

    def __init__(self, message: str, code: str = "student_view_error"):
        super().__init__(message, code)


class StudentNotFoundError(StudentViewError):
    """Student (or their enrollment) not found."""

    def __init__(self, message: str = "Student not found"):
        super().__init__(message, "student_not_found")


class CourseNotFoundError(StudentViewError):
    """Student's course not found."""

    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")


class LessonNotFoundError(StudentViewError):
    """Lesson not found, or not accessible to the student."""

    def __init__(self, message: str = "Lesson not found or access denied"):
        super().__init__(message, "lesson_not_found")


# ==============================================================================
# Student View Service
# ==============================================================================


class StudentViewService:
    """Builds the dashboard, course and lesson views of a student."""

    def __init__(
        self,
        enrollment_store: "EnrollmentStore",
        curriculum_store: "CurriculumStore",
        progress_store: "ProgressStore",
    ):
        """Initialize with the stores the views read from."""
        self.enrollment_store = enrollment_store
        self.curriculum_store = curriculum_store
        self.progress_store = progress_store
        self.access_gate = AccessGate(curriculum_store)

    async def build_dashboard(self, student_id: UUID) -> DashboardView:
        """Build the student dashboard.

        Args:
            student_id: Student UUID

        Returns:
            DashboardView

        Raises:
            StudentNotFoundError: If the student or their enrollment is missing
            CourseNotFoundError: If the course structure is missing
        """
        enrollment = await self.enrollment_store.get_student_with_enrollment(
            student_id
        )
        if not enrollment:
            raise StudentNotFoundError

        course = await self.curriculum_store.get_course_structure(
            enrollment.student.course_id
        )
        if not course:
            raise CourseNotFoundError

        # All of the student's records, so stray ones surface as violations
        records = await self.progress_store.get_progress(student_id)
        summary = aggregator.summarize(course, records)
        pending = await self.curriculum_store.count_pending_assignments(
            student_id, course.unit_ids
        )

        logger.debug(
            "dashboard_built",
            student_id=str(student_id),
            units=len(course.units),
            overall=summary.overall,
        )

        return DashboardView(
            student=StudentSummary.from_enrollment(enrollment),
            progress=ProgressView(
                overall=summary.overall,
                by_unit=[UnitProgressView.from_completion(u) for u in summary.by_unit],
            ),
            assignments=AssignmentsView(
                pending=pending,
                total=summary.total_assignments,
            ),
        )

    async def build_course_view(self, student_id: UUID) -> CourseView:
        """Build the student's course view with enabled lessons only.

        Raises:
            StudentNotFoundError: If the student does not exist
            CourseNotFoundError: If the course structure is missing
        """
        student = await self.enrollment_store.get_student(student_id)
        if not student:
            raise StudentNotFoundError

        course = await self.curriculum_store.get_course_structure(
            student.course_id, enabled_only=True
        )
        if not course:
            raise CourseNotFoundError

        records = await self.progress_store.get_progress(student_id, course.unit_ids)
        indexed = aggregator.index_progress(course, records)

        units = []
        for unit in course.units:
            progress = aggregator.progress_for_unit(indexed, student_id, unit.id)
            lessons = [
                LessonStatusView.from_entity(
                    lesson, aggregator.lesson_status(progress, lesson.id)
                )
                for lesson in sorted(unit.lessons, key=lambda lesson: lesson.order)
                if lesson.enabled
            ]
            units.append(UnitView.from_entity(unit, progress.completion, lessons))

        return CourseView(course=CourseSummary.from_entity(course), units=units)

    async def build_lesson_view(self, student_id: UUID, lesson_id: UUID) -> LessonView:
        """Build a lesson's detail view.

        Raises:
            LessonNotFoundError: If the lesson does not exist or the student
                may not view it
        """
        path = await self.access_gate.resolve_lesson(student_id, lesson_id)
        if path is None:
            raise LessonNotFoundError

        lesson = path.lesson
        records = await self.progress_store.get_progress(student_id, [lesson.unit_id])
        progress = next(
            (r for r in records if r.unit_id == lesson.unit_id),
            Progress.empty(student_id, lesson.unit_id),
        )
        record = aggregator.lesson_status(progress, lesson.id)

        return LessonView(
            lesson=LessonDetail(
                id=lesson.id,
                title=lesson.title,
                description=lesson.description,
                order=lesson.order,
                status=record.status,
            ),
            resources=[ResourceView.from_entity(r) for r in lesson.resources],
        )
