"""Tests for the Cassandra progress store."""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from cassandra.cluster import Session

from portal.progress.models import LessonProgressStatus
from portal.progress.store import CassandraProgressStore


class _Result(list):
    """Rows returned by aexecute."""

    def one(self):
        return self[0] if self else None


@pytest.fixture
def mock_session():
    """Mock Cassandra session."""
    session = Mock(spec=Session)
    session.prepare = Mock(return_value=Mock())
    session.aexecute = AsyncMock(return_value=_Result())
    return session


@pytest.fixture
def store(mock_session):
    return CassandraProgressStore(session=mock_session, keyspace="test_keyspace")


def _unit_row(student_id, unit_id, completion):
    return SimpleNamespace(
        student_id=student_id,
        unit_id=unit_id,
        completion=completion,
        created_at=datetime(2024, 1, 1),
        updated_at=None,
    )


class TestGetProgress:
    """Tests for reading progress."""

    @pytest.mark.asyncio
    async def test_all_records_with_lessons(self, store, mock_session) -> None:
        student_id, unit_id, lesson_id = uuid4(), uuid4(), uuid4()
        lesson_row = SimpleNamespace(
            lesson_id=lesson_id,
            status=LessonProgressStatus.COMPLETED.value,
            completed_at=datetime(2024, 2, 1),
        )
        mock_session.aexecute.side_effect = [
            _Result([_unit_row(student_id, unit_id, 55.5)]),
            _Result([lesson_row]),
        ]

        records = await store.get_progress(student_id)

        assert len(records) == 1
        assert records[0].completion == 55.5
        assert records[0].created_at.tzinfo is not None
        status = records[0].lesson_status(lesson_id)
        assert status.status == LessonProgressStatus.COMPLETED.value
        assert status.completed_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_restricted_to_units_skips_missing(
        self, store, mock_session
    ) -> None:
        student_id, u1, u2 = uuid4(), uuid4(), uuid4()
        mock_session.aexecute.side_effect = [
            _Result([_unit_row(student_id, u1, None)]),
            _Result(),
            _Result(),
        ]

        records = await store.get_progress(student_id, [u1, u2])

        assert [r.unit_id for r in records] == [u1]
        assert records[0].completion == 0.0
        assert records[0].lesson_status(uuid4()).status == "NOT_STARTED"


class TestCreateInitialProgress:
    """Tests for registration progress records."""

    @pytest.mark.asyncio
    async def test_one_zero_record_per_unit(self, store, mock_session) -> None:
        student_id = uuid4()
        unit_ids = [uuid4(), uuid4(), uuid4()]

        records = await store.create_initial_progress(student_id, unit_ids)

        assert [r.unit_id for r in records] == unit_ids
        assert all(r.completion == 0.0 for r in records)
        assert mock_session.aexecute.await_count == 3
        params = mock_session.aexecute.await_args_list[0].args[1]
        assert params[:3] == [student_id, unit_ids[0], 0.0]

    @pytest.mark.asyncio
    async def test_no_units(self, store, mock_session) -> None:
        assert await store.create_initial_progress(uuid4(), []) == []
        mock_session.aexecute.assert_not_awaited()
