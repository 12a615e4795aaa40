"""Student authentication service layer.

Business logic for:
- Student registration (with initial unit progress)
- Login and access token creation
- Password change
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from portal.auth.schemas import StudentRegisterRequest
from portal.auth.security import create_access_token, hash_password, verify_password
from portal.core.exceptions import PortalError
from portal.enrollment.models import Student, StudentEnrollment, StudentStatus


if TYPE_CHECKING:
    from portal.curriculum.models import Course
    from portal.curriculum.store import CurriculumStore
    from portal.enrollment.models import Group
    from portal.enrollment.store import EnrollmentStore
    from portal.progress.store import ProgressStore

logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class AuthError(PortalError):
    """Base authentication error."""

    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthError):
    """Invalid email or password."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, "invalid_credentials")


class StudentExistsError(AuthError):
    """Email already registered."""

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message, "student_exists")


class GroupNotFoundError(AuthError):
    """No group with the given code."""

    def __init__(self, message: str = "Group not found"):
        super().__init__(message, "group_not_found")


class CourseNotFoundError(AuthError):
    """No course with the given code."""

    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")


class StudentNotAuthenticatedError(AuthError):
    """Token does not belong to an existing, active student."""

    def __init__(self, message: str = "Please authenticate as a student"):
        super().__init__(message, "not_authenticated")


# ==============================================================================
# Student Auth Service
# ==============================================================================


class StudentAuthService:
    """Registration, login and password management for students."""

    def __init__(
        self,
        enrollment_store: "EnrollmentStore",
        curriculum_store: "CurriculumStore",
        progress_store: "ProgressStore",
    ):
        self.enrollment_store = enrollment_store
        self.curriculum_store = curriculum_store
        self.progress_store = progress_store

    async def register_student(
        self, data: StudentRegisterRequest
    ) -> tuple[Student, "Group", "Course"]:
        """Register a new student in PENDING status.

        Creates one zero-completion progress record per unit of the course.

        Args:
            data: Registration data

        Returns:
            Tuple of (student, group, course)

        Raises:
            StudentExistsError: If the email is already registered
            GroupNotFoundError: If the group code is unknown
            CourseNotFoundError: If the course code is unknown
        """
        if await self.enrollment_store.get_student_by_email(data.email):
            raise StudentExistsError

        group = await self.enrollment_store.get_group_by_code(data.group_code)
        if not group:
            raise GroupNotFoundError

        course = await self.enrollment_store.get_course_by_code(data.course_code)
        if not course:
            raise CourseNotFoundError

        student = Student(
            full_name=data.full_name,
            email=data.email,
            password_hash=hash_password(data.password),
            type=data.type,
            status=StudentStatus.PENDING.value,
            group_id=group.id,
            course_id=course.id,
        )
        await self.enrollment_store.create_student(student)

        structure = await self.curriculum_store.get_course_structure(course.id)
        unit_ids = structure.unit_ids if structure else []
        await self.progress_store.create_initial_progress(student.id, unit_ids)

        logger.info(
            "student_registered",
            student_id=str(student.id),
            group=group.group_code,
            course=course.course_code,
            units=len(unit_ids),
        )
        return student, group, course

    async def authenticate_student(
        self, email: str, password: str
    ) -> StudentEnrollment:
        """Authenticate a student by email and password.

        Account status is not checked here; student routes require ACTIVE.

        Raises:
            InvalidCredentialsError: If email or password is wrong
        """
        student = await self.enrollment_store.get_student_by_email(email)
        if not student:
            logger.info("student_login_failed", reason="unknown_email")
            raise InvalidCredentialsError

        is_valid, new_hash = verify_password(password, student.password_hash)
        if not is_valid:
            logger.info(
                "student_login_failed",
                student_id=str(student.id),
                reason="wrong_password",
            )
            raise InvalidCredentialsError

        # Update hash if needed (algorithm params changed)
        if new_hash:
            await self.enrollment_store.update_student_password(student.id, new_hash)
            student.password_hash = new_hash

        enrollment = await self.enrollment_store.get_student_with_enrollment(
            student.id
        )
        if not enrollment:
            raise InvalidCredentialsError

        logger.info("student_logged_in", student_id=str(student.id))
        return enrollment

    def create_token(self, student: Student) -> str:
        """Create an access token for the student."""
        return create_access_token({"sub": str(student.id), "email": student.email})

    async def get_active_student(self, student_id: UUID) -> Student:
        """Get a student who may use the student routes.

        Raises:
            StudentNotAuthenticatedError: If the student is missing or not ACTIVE
        """
        student = await self.enrollment_store.get_student(student_id)
        if not student or not student.is_active:
            logger.info(
                "student_not_authenticated",
                student_id=str(student_id),
                status=student.status if student else None,
            )
            raise StudentNotAuthenticatedError
        return student

    async def change_password(
        self,
        student_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change a student's password.

        Raises:
            StudentNotAuthenticatedError: If the student doesn't exist
            InvalidCredentialsError: If current password is wrong
        """
        student = await self.enrollment_store.get_student(student_id)
        if not student:
            raise StudentNotAuthenticatedError

        is_valid, _ = verify_password(current_password, student.password_hash)
        if not is_valid:
            raise InvalidCredentialsError("Current password is incorrect")

        await self.enrollment_store.update_student_password(
            student.id, hash_password(new_password)
        )
        logger.info("student_password_changed", student_id=str(student.id))
