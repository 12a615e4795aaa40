"""Pydantic schemas for student authentication.

Request and response models for:
- Registration
- Login
- Password change

Fields use camelCase aliases; snake_case names are accepted too.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from portal.auth.validators import validate_code, validate_password
from portal.curriculum.models import Course
from portal.enrollment.models import Group, Student, StudentStatus


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==============================================================================
# Request Schemas
# ==============================================================================


class StudentRegisterRequest(CamelModel):
    """Student registration request."""

    full_name: str = Field(..., min_length=2, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=8, description="Password")
    group_code: str = Field(..., description="Code of the student's group")
    course_code: str = Field(..., description="Code of the student's course")
    type: str = Field(..., min_length=1, max_length=50, description="Student type")

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        result = validate_password(v)
        if not result.valid:
            msg = result.message or "Invalid password"
            raise ValueError(msg)
        return v

    @field_validator("group_code", "course_code")
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        result = validate_code(v)
        if not result.valid:
            msg = result.message or "Invalid code"
            raise ValueError(msg)
        return result.formatted or v

    @field_validator("full_name", "type")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class StudentLoginRequest(CamelModel):
    """Student login request."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class ChangePasswordRequest(CamelModel):
    """Password change request."""

    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., min_length=8, description="New password")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        result = validate_password(v)
        if not result.valid:
            msg = result.message or "Invalid password"
            raise ValueError(msg)
        return v


# ==============================================================================
# Response Schemas
# ==============================================================================


class StudentRegisteredResponse(CamelModel):
    """Registered student."""

    id: UUID
    full_name: str
    email: str
    status: StudentStatus
    group: str = Field(description="Group code")
    course: str = Field(description="Course code")

    @classmethod
    def from_entity(
        cls, student: Student, group: Group, course: Course
    ) -> "StudentRegisteredResponse":
        return cls(
            id=student.id,
            full_name=student.full_name,
            email=student.email,
            status=StudentStatus(student.status),
            group=group.group_code,
            course=course.course_code,
        )


class StudentLoginResponse(CamelModel):
    """Authenticated student with access token."""

    id: UUID
    full_name: str
    email: str
    group: str = Field(description="Group code")
    course: str = Field(description="Course code")
    type: str
    token: str = Field(description="JWT access token")


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
