"""Progress store: per-unit completion and per-lesson status records.

``ProgressStore`` is the contract the core depends on;
``CassandraProgressStore`` is the production implementation.
"""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

import structlog

from portal.core.database import CassandraStore
from portal.progress.models import LessonStatusRecord, Progress
from portal.utils.dates import utc_now


logger = structlog.get_logger(__name__)


class ProgressStore(Protocol):
    """Read/write contract for student progress."""

    async def get_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID] | None = None
    ) -> list[Progress]: ...

    async def create_initial_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> list[Progress]: ...


class CassandraProgressStore(CassandraStore):
    """Progress store backed by Cassandra."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._get_student_progress = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.unit_progress WHERE student_id = ?"
        )
        self._get_unit_progress = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.unit_progress
            WHERE student_id = ? AND unit_id = ?
        """)
        self._get_lesson_progress = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.lesson_progress
            WHERE student_id = ? AND unit_id = ?
        """)
        # IF NOT EXISTS keeps registration from resetting an existing record
        self._insert_unit_progress = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.unit_progress
            (student_id, unit_id, completion, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            IF NOT EXISTS
        """)

    async def get_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID] | None = None
    ) -> list[Progress]:
        """Get progress records with their lesson status records.

        Args:
            student_id: Student UUID
            unit_ids: Restrict to these units; all of the student's records
                when None

        Returns:
            Stored records only; units without a record are simply absent.
        """
        if unit_ids is None:
            rows = list(await self._execute(self._get_student_progress, [student_id]))
        else:
            rows = []
            for unit_id in unit_ids:
                result = await self._execute(
                    self._get_unit_progress, [student_id, unit_id]
                )
                row = result.one()
                if row:
                    rows.append(row)

        records = []
        for row in rows:
            lesson_rows = await self._execute(
                self._get_lesson_progress, [student_id, row.unit_id]
            )
            lessons = [LessonStatusRecord.from_row(lr) for lr in lesson_rows]
            records.append(Progress.from_row(row, lessons))

        return records

    async def create_initial_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> list[Progress]:
        """Create a zero-completion record for each unit."""
        now = utc_now()
        records = []

        for unit_id in unit_ids:
            progress = Progress(student_id=student_id, unit_id=unit_id, created_at=now)
            await self._execute(
                self._insert_unit_progress,
                [
                    progress.student_id,
                    progress.unit_id,
                    progress.completion,
                    progress.created_at,
                    progress.updated_at,
                ],
            )
            records.append(progress)

        logger.info(
            "initial_progress_created",
            student_id=str(student_id),
            units=len(records),
        )
        return records
