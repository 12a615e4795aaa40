"""Enrollment store: students, groups and course-group links.

``EnrollmentStore`` is the read/write contract the core depends on;
``CassandraEnrollmentStore`` is the production implementation.
"""

from typing import Protocol
from uuid import UUID

import structlog

from portal.core.database import CassandraStore
from portal.curriculum.models import Course
from portal.enrollment.models import Group, Student, StudentEnrollment
from portal.utils.dates import utc_now


logger = structlog.get_logger(__name__)


class EnrollmentStore(Protocol):
    """Read/write contract for enrollment data."""

    async def get_student(self, student_id: UUID) -> Student | None: ...

    async def get_student_by_email(self, email: str) -> Student | None: ...

    async def get_student_with_enrollment(
        self, student_id: UUID
    ) -> StudentEnrollment | None: ...

    async def get_group_by_code(self, group_code: str) -> Group | None: ...

    async def get_course_by_code(self, course_code: str) -> Course | None: ...

    async def get_course_group_ids(self, course_id: UUID) -> list[UUID]: ...

    async def create_student(self, student: Student) -> None: ...

    async def update_student_password(
        self, student_id: UUID, password_hash: str
    ) -> None: ...


class CassandraEnrollmentStore(CassandraStore):
    """Enrollment store backed by Cassandra."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        # Students
        self._get_student_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.students WHERE id = ?"
        )
        self._get_student_id_by_email = self.session.prepare(
            f"SELECT student_id FROM {self.keyspace}.students_by_email WHERE email = ?"
        )
        self._insert_student = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.students
            (id, full_name, email, password_hash, type, status, group_id,
             course_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._insert_student_by_email = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.students_by_email (email, student_id)
            VALUES (?, ?)
        """)
        self._update_student_password = self.session.prepare(f"""
            UPDATE {self.keyspace}.students
            SET password_hash = ?, updated_at = ?
            WHERE id = ?
        """)

        # Groups
        self._get_group_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.groups WHERE id = ?"
        )
        self._get_group_id_by_code = self.session.prepare(
            f"SELECT group_id FROM {self.keyspace}.groups_by_code WHERE group_code = ?"
        )
        self._get_course_groups = self.session.prepare(
            f"SELECT group_id FROM {self.keyspace}.course_groups WHERE course_id = ?"
        )

        # Courses (summary only, structure lives in the curriculum store)
        self._get_course_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._get_course_id_by_code = self.session.prepare(
            f"SELECT course_id FROM {self.keyspace}.courses_by_code WHERE course_code = ?"
        )

    # ==========================================================================
    # Students
    # ==========================================================================

    async def get_student(self, student_id: UUID) -> Student | None:
        """Get student by ID."""
        result = await self._execute(self._get_student_by_id, [student_id])
        row = result.one()
        return Student.from_row(row) if row else None

    async def get_student_by_email(self, email: str) -> Student | None:
        """Get student by email (case-insensitive)."""
        result = await self._execute(
            self._get_student_id_by_email, [email.lower().strip()]
        )
        row = result.one()
        return await self.get_student(row.student_id) if row else None

    async def get_student_with_enrollment(
        self, student_id: UUID
    ) -> StudentEnrollment | None:
        """Get student with group and course summary.

        Returns None if the student, their group or their course is missing.
        """
        student = await self.get_student(student_id)
        if not student:
            return None

        group = await self._get_group(student.group_id)
        course = await self._get_course(student.course_id)
        if not group or not course:
            logger.warning(
                "student_enrollment_incomplete",
                student_id=str(student_id),
                group_found=group is not None,
                course_found=course is not None,
            )
            return None

        return StudentEnrollment(student=student, group=group, course=course)

    async def create_student(self, student: Student) -> None:
        """Insert student into main table and email lookup (dual write)."""
        await self._execute(
            self._insert_student,
            [
                student.id,
                student.full_name,
                student.email,
                student.password_hash,
                student.type,
                student.status,
                student.group_id,
                student.course_id,
                student.created_at,
                student.updated_at,
            ],
        )
        await self._execute(self._insert_student_by_email, [student.email, student.id])

    async def update_student_password(self, student_id: UUID, password_hash: str) -> None:
        """Replace the stored password hash."""
        await self._execute(
            self._update_student_password, [password_hash, utc_now(), student_id]
        )

    # ==========================================================================
    # Groups and courses
    # ==========================================================================

    async def _get_group(self, group_id: UUID) -> Group | None:
        result = await self._execute(self._get_group_by_id, [group_id])
        row = result.one()
        return Group.from_row(row) if row else None

    async def get_group_by_code(self, group_code: str) -> Group | None:
        """Get group by its code."""
        result = await self._execute(self._get_group_id_by_code, [group_code])
        row = result.one()
        return await self._get_group(row.group_id) if row else None

    async def _get_course(self, course_id: UUID) -> Course | None:
        result = await self._execute(self._get_course_by_id, [course_id])
        row = result.one()
        return Course.from_row(row) if row else None

    async def get_course_by_code(self, course_code: str) -> Course | None:
        """Get course summary (without units) by its code."""
        result = await self._execute(self._get_course_id_by_code, [course_code])
        row = result.one()
        return await self._get_course(row.course_id) if row else None

    async def get_course_group_ids(self, course_id: UUID) -> list[UUID]:
        """IDs of the groups linked to a course."""
        rows = await self._execute(self._get_course_groups, [course_id])
        return [row.group_id for row in rows]
