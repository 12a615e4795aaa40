"""Student portal API endpoints.

Provides routes for:
- Dashboard
- Course view with lesson status
- Lesson detail (access-gated)
"""

from uuid import UUID

from fastapi import APIRouter

from portal.auth.dependencies import CurrentStudent

from .dependencies import StudentViewServiceDep, handle_student_error
from .schemas import CourseView, DashboardView, LessonView
from .service import StudentViewError


router = APIRouter(prefix="/v1/student", tags=["student"])


@router.get(
    "/dashboard",
    response_model=DashboardView,
    summary="Get student dashboard",
    responses={404: {"description": "Student not found"}},
)
async def get_dashboard(
    student: CurrentStudent,
    service: StudentViewServiceDep,
) -> DashboardView:
    """Get overall and per-unit progress plus assignment counters."""
    try:
        return await service.build_dashboard(student.id)
    except StudentViewError as e:
        raise handle_student_error(e) from e


@router.get(
    "/courses",
    response_model=CourseView,
    summary="Get student course",
    responses={404: {"description": "Student or course not found"}},
)
async def get_courses(
    student: CurrentStudent,
    service: StudentViewServiceDep,
) -> CourseView:
    """Get the student's course with units and enabled lessons."""
    try:
        return await service.build_course_view(student.id)
    except StudentViewError as e:
        raise handle_student_error(e) from e


@router.get(
    "/lessons/{lesson_id}",
    response_model=LessonView,
    summary="Get lesson details",
    responses={404: {"description": "Lesson not found or access denied"}},
)
async def get_lesson(
    lesson_id: UUID,
    student: CurrentStudent,
    service: StudentViewServiceDep,
) -> LessonView:
    """Get a lesson with the student's status and its resources."""
    try:
        return await service.build_lesson_view(student.id, lesson_id)
    except StudentViewError as e:
        raise handle_student_error(e) from e
