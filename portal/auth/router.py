"""Student authentication API endpoints.

Provides routes for:
- Student registration
- Student login
- Password change
"""

from fastapi import APIRouter, status

from portal.auth.dependencies import AuthServiceDep, CurrentStudent, handle_auth_error
from portal.auth.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    StudentLoginRequest,
    StudentLoginResponse,
    StudentRegisteredResponse,
    StudentRegisterRequest,
)
from portal.auth.service import AuthError


router = APIRouter(prefix="/v1/auth/student", tags=["auth"])


@router.post(
    "/register",
    response_model=StudentRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new student",
    responses={
        404: {"description": "Group or course not found"},
        409: {"description": "Email already registered"},
        422: {"description": "Validation error"},
    },
)
async def register(
    data: StudentRegisterRequest,
    auth_service: AuthServiceDep,
) -> StudentRegisteredResponse:
    """Register a student account.

    The account starts as PENDING and must be activated before the
    student routes can be used.
    """
    try:
        student, group, course = await auth_service.register_student(data)
    except AuthError as e:
        raise handle_auth_error(e) from e

    return StudentRegisteredResponse.from_entity(student, group, course)


@router.post(
    "/login",
    response_model=StudentLoginResponse,
    summary="Student login",
    responses={
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    data: StudentLoginRequest,
    auth_service: AuthServiceDep,
) -> StudentLoginResponse:
    """Authenticate a student and return an access token."""
    try:
        enrollment = await auth_service.authenticate_student(data.email, data.password)
    except AuthError as e:
        raise handle_auth_error(e) from e

    student = enrollment.student
    return StudentLoginResponse(
        id=student.id,
        full_name=student.full_name,
        email=student.email,
        group=enrollment.group.group_code,
        course=enrollment.course.course_code,
        type=student.type,
        token=auth_service.create_token(student),
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    responses={
        401: {"description": "Not authenticated or wrong current password"},
    },
)
async def change_password(
    data: ChangePasswordRequest,
    student: CurrentStudent,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """Change the authenticated student's password."""
    try:
        await auth_service.change_password(
            student.id, data.current_password, data.new_password
        )
    except AuthError as e:
        raise handle_auth_error(e) from e

    return MessageResponse(message="Password updated successfully")
