"""Database models for student enrollment.

Cassandra table definitions for:
- Students: account and enrollment (one group, one course)
- Groups: cohorts identified by a stable code
- Course groups: which groups may access which course

Note: Uses cassandra-driver directly (not ORM).
"""

from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple
from uuid import UUID, uuid4

from portal.curriculum.models import Course
from portal.utils.dates import ensure_utc_aware, utc_now


class StudentStatus(str, Enum):
    """Student account lifecycle status."""

    PENDING = "PENDING"  # Registered, awaiting approval
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

STUDENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.students (
    id UUID PRIMARY KEY,
    full_name TEXT,
    email TEXT,
    password_hash TEXT,
    type TEXT,
    status TEXT,
    group_id UUID,
    course_id UUID,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

STUDENTS_BY_EMAIL_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.students_by_email (
    email TEXT PRIMARY KEY,
    student_id UUID
)
"""

GROUP_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.groups (
    id UUID PRIMARY KEY,
    group_code TEXT,
    name TEXT
)
"""

GROUPS_BY_CODE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.groups_by_code (
    group_code TEXT PRIMARY KEY,
    group_id UUID
)
"""

# Many-to-many: groups allowed to access a course
COURSE_GROUPS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.course_groups (
    course_id UUID,
    group_id UUID,
    PRIMARY KEY (course_id, group_id)
)
"""

ENROLLMENT_TABLES_CQL = [
    STUDENT_TABLE_CQL,
    STUDENTS_BY_EMAIL_TABLE_CQL,
    GROUP_TABLE_CQL,
    GROUPS_BY_CODE_TABLE_CQL,
    COURSE_GROUPS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Group:
    """Student cohort."""

    def __init__(self, group_code: str, id: UUID | None = None, name: str = ""):
        self.id = id or uuid4()
        self.group_code = group_code
        self.name = name

    @classmethod
    def from_row(cls, row: Any) -> "Group":
        """Create Group from a groups row."""
        return cls(id=row.id, group_code=row.group_code, name=row.name or "")

    def __repr__(self) -> str:
        return f"<Group {self.group_code}>"


class Student:
    """Student account with its enrollment references.

    Attributes:
        id: Unique identifier (UUID)
        full_name: Display name
        email: Unique, lowercased email address
        password_hash: Argon2id hash
        type: Student type given at registration
        status: Lifecycle status (PENDING, ACTIVE, SUSPENDED)
        group_id: The one group the student belongs to
        course_id: The one course the student is enrolled in
        created_at: Registration timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        group_id: UUID,
        course_id: UUID,
        id: UUID | None = None,
        full_name: str = "",
        email: str = "",
        password_hash: str = "",
        type: str = "",
        status: str = StudentStatus.PENDING.value,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.full_name = full_name.strip()
        self.email = email.lower().strip()
        self.password_hash = password_hash
        self.type = type
        self.status = status
        self.group_id = group_id
        self.course_id = course_id
        self.created_at = ensure_utc_aware(created_at) or utc_now()
        self.updated_at = ensure_utc_aware(updated_at)

    @property
    def is_active(self) -> bool:
        """Check if the account has been approved."""
        return self.status == StudentStatus.ACTIVE.value

    @classmethod
    def from_row(cls, row: Any) -> "Student":
        """Create Student from a students row."""
        return cls(
            id=row.id,
            full_name=row.full_name or "",
            email=row.email or "",
            password_hash=row.password_hash or "",
            type=row.type or "",
            status=row.status or StudentStatus.PENDING.value,
            group_id=row.group_id,
            course_id=row.course_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Student {self.email} {self.status}>"


class StudentEnrollment(NamedTuple):
    """A student together with their group and course summary."""

    student: Student
    group: Group
    course: Course
