"""Tests for the lesson access gate."""

from uuid import uuid4

import pytest

from portal.student.access import AccessGate


@pytest.fixture
def gate(curriculum_store) -> AccessGate:
    return AccessGate(curriculum_store)


class TestCanAccessLesson:
    """Access is granted through group to course links."""

    @pytest.mark.asyncio
    async def test_member_of_linked_group(self, gate, portal) -> None:
        assert await gate.can_access_lesson(portal.student.id, portal.intro.id)

    @pytest.mark.asyncio
    async def test_group_not_linked_to_course(self, gate, portal) -> None:
        assert not await gate.can_access_lesson(portal.outsider.id, portal.intro.id)

    @pytest.mark.asyncio
    async def test_missing_lesson(self, gate, portal) -> None:
        assert not await gate.can_access_lesson(portal.student.id, uuid4())

    @pytest.mark.asyncio
    async def test_unknown_student(self, gate, portal) -> None:
        assert not await gate.can_access_lesson(uuid4(), portal.intro.id)

    @pytest.mark.asyncio
    async def test_disabled_lesson_is_still_accessible(self, gate, portal) -> None:
        assert await gate.can_access_lesson(portal.student.id, portal.draft.id)


class TestResolveLesson:
    """Denied and missing lessons look the same."""

    @pytest.mark.asyncio
    async def test_resolves_path(self, gate, portal) -> None:
        path = await gate.resolve_lesson(portal.student.id, portal.intro.id)

        assert path.lesson.id == portal.intro.id
        assert path.course_id == portal.course.id
        assert path.accessible_group_ids == [portal.g1.id]

    @pytest.mark.asyncio
    async def test_denied_and_missing_both_none(self, gate, portal) -> None:
        denied = await gate.resolve_lesson(portal.outsider.id, portal.intro.id)
        missing = await gate.resolve_lesson(portal.student.id, uuid4())

        assert denied is None
        assert missing is None
