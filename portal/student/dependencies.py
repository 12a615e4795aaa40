"""FastAPI dependencies for the student views.

Provides dependency injection for:
- Student view service
- Error handlers
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import StudentViewError, StudentViewService


async def get_student_view_service(request: Request) -> StudentViewService:
    """Get student view service from app state.

    Args:
        request: FastAPI request

    Returns:
        StudentViewService instance
    """
    app_state = request.app.state
    if (
        not hasattr(app_state, "student_view_service")
        or not app_state.student_view_service
    ):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Student service not available",
        )
    return app_state.student_view_service


# Type alias for dependency injection
StudentViewServiceDep = Annotated[
    StudentViewService, Depends(get_student_view_service)
]


def handle_student_error(error: StudentViewError) -> HTTPException:
    """Convert student view errors to HTTP exceptions.

    Args:
        error: Student view error

    Returns:
        HTTPException with appropriate status code
    """
    status_map = {
        "student_not_found": status.HTTP_404_NOT_FOUND,
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "lesson_not_found": status.HTTP_404_NOT_FOUND,
    }

    status_code = status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTTPException(
        status_code=status_code,
        detail=error.message,
    )
