"""FastAPI dependencies for student authentication.

Provides dependency injection for:
- Student auth service
- Current student extraction from JWT
- Error handlers
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError

from portal.auth.security import decode_access_token
from portal.auth.service import (
    AuthError,
    StudentAuthService,
    StudentNotAuthenticatedError,
)
from portal.core.context import set_student_id
from portal.enrollment.models import Student


async def get_auth_service(request: Request) -> StudentAuthService:
    """Get student auth service from app state."""
    app_state = request.app.state
    if not hasattr(app_state, "auth_service") or not app_state.auth_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service not available",
        )
    return app_state.auth_service


AuthServiceDep = Annotated[StudentAuthService, Depends(get_auth_service)]


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header.

    Returns:
        Token string or None if not present
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


def handle_auth_error(error: AuthError) -> HTTPException:
    """Convert AuthError to HTTPException."""
    status_map = {
        "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
        "not_authenticated": status.HTTP_401_UNAUTHORIZED,
        "student_exists": status.HTTP_409_CONFLICT,
        "group_not_found": status.HTTP_404_NOT_FOUND,
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "auth_error": status.HTTP_400_BAD_REQUEST,
    }

    status_code = status_map.get(error.code, status.HTTP_400_BAD_REQUEST)
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )

    return HTTPException(
        status_code=status_code,
        detail=error.message,
        headers=headers,
    )


async def get_current_student(
    token: Annotated[str | None, Depends(get_token_from_header)],
    auth_service: AuthServiceDep,
) -> Student:
    """Get the authenticated, ACTIVE student from the JWT token.

    Raises:
        HTTPException(401): If the token is missing or invalid, or the
            student does not exist or is not ACTIVE
    """
    if not token:
        raise handle_auth_error(StudentNotAuthenticatedError())

    try:
        payload = decode_access_token(token)
        student_id = UUID(payload["sub"])
    except (JWTError, ValueError) as e:
        raise handle_auth_error(StudentNotAuthenticatedError()) from e

    # Set student_id in context for logging
    set_student_id(student_id)

    try:
        return await auth_service.get_active_student(student_id)
    except StudentNotAuthenticatedError as e:
        raise handle_auth_error(e) from e


CurrentStudent = Annotated[Student, Depends(get_current_student)]
