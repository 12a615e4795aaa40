"""Tests for progress aggregation."""

from uuid import uuid4

import pytest

from portal.curriculum.models import Course, Lesson, LessonType, Unit
from portal.progress import aggregator
from portal.progress.models import LessonProgressStatus, LessonStatusRecord, Progress


@pytest.fixture
def student_id():
    return uuid4()


@pytest.fixture
def course() -> Course:
    course = Course(course_code="C1", title="Course")
    course.units = [
        Unit(course_id=course.id, unit_code=f"U{i}", unit_name=f"Unit {i}", position=i)
        for i in range(1, 5)
    ]
    return course


class TestOverallProgress:
    """Tests for overall completion."""

    def test_half_of_units_completed(self, course, student_id) -> None:
        """Two completed units out of four gives 50."""
        records = [
            Progress(student_id=student_id, unit_id=course.units[0].id, completion=100),
            Progress(student_id=student_id, unit_id=course.units[1].id, completion=100),
            Progress(student_id=student_id, unit_id=course.units[2].id, completion=99.9),
        ]
        summary = aggregator.summarize(course, records)
        assert summary.overall == 50.0

    def test_partial_completion_does_not_count(self, student_id) -> None:
        """U1=100, U2=40 gives 50."""
        course = Course(course_code="C2")
        u1 = Unit(course_id=course.id, unit_code="U1")
        u2 = Unit(course_id=course.id, unit_code="U2")
        course.units = [u1, u2]
        records = [
            Progress(student_id=student_id, unit_id=u1.id, completion=100),
            Progress(student_id=student_id, unit_id=u2.id, completion=40),
        ]
        assert aggregator.summarize(course, records).overall == 50.0

    def test_course_without_units_is_zero(self, student_id) -> None:
        """No units means zero progress."""
        summary = aggregator.summarize(Course(course_code="EMPTY"), [])
        assert summary.overall == 0.0
        assert summary.by_unit == []
        assert summary.total_assignments == 0

    def test_no_progress_records(self, course) -> None:
        """No records gives zero overall and zero per unit."""
        summary = aggregator.summarize(course, [])
        assert summary.overall == 0.0
        assert [u.completion for u in summary.by_unit] == [0.0, 0.0, 0.0, 0.0]

    def test_all_units_completed(self, course, student_id) -> None:
        records = [
            Progress(student_id=student_id, unit_id=u.id, completion=100)
            for u in course.units
        ]
        assert aggregator.summarize(course, records).overall == 100.0


class TestUnitCompletions:
    """Tests for per-unit completion."""

    def test_every_course_unit_is_listed_in_order(self, course, student_id) -> None:
        """Units without a record are listed with zero completion."""
        records = [
            Progress(student_id=student_id, unit_id=course.units[2].id, completion=30)
        ]
        by_unit = aggregator.summarize(course, records).by_unit

        assert [u.unit_id for u in by_unit] == course.unit_ids
        assert [u.unit_code for u in by_unit] == ["U1", "U2", "U3", "U4"]
        assert [u.completion for u in by_unit] == [0.0, 0.0, 30, 0.0]

    def test_unit_names_are_carried(self, course) -> None:
        by_unit = aggregator.summarize(course, []).by_unit
        assert by_unit[0].unit_name == "Unit 1"


class TestInvariantViolations:
    """Records breaking the one-per-course-unit rule are skipped."""

    def test_record_outside_course_is_skipped(self, course, student_id) -> None:
        records = [
            Progress(student_id=student_id, unit_id=uuid4(), completion=100),
            Progress(student_id=student_id, unit_id=course.units[0].id, completion=100),
        ]
        indexed = aggregator.index_progress(course, records)

        assert list(indexed) == [course.units[0].id]
        assert aggregator.summarize(course, records).overall == 25.0

    def test_duplicate_record_keeps_first(self, course, student_id) -> None:
        unit_id = course.units[0].id
        first = Progress(student_id=student_id, unit_id=unit_id, completion=20)
        second = Progress(student_id=student_id, unit_id=unit_id, completion=100)

        indexed = aggregator.index_progress(course, [first, second])

        assert indexed[unit_id] is first
        assert aggregator.summarize(course, [first, second]).overall == 0.0

    def test_progress_for_unit_defaults_to_empty(self, course, student_id) -> None:
        unit_id = course.units[0].id
        progress = aggregator.progress_for_unit({}, student_id, unit_id)

        assert progress.completion == 0.0
        assert progress.lessons == []
        assert progress.unit_id == unit_id

    @pytest.mark.parametrize("completion", [-5.0, 100.5, 150.0])
    def test_completion_out_of_range_is_skipped(
        self, course, student_id, completion
    ) -> None:
        unit_id = course.units[0].id
        records = [
            Progress(student_id=student_id, unit_id=unit_id, completion=completion),
            Progress(student_id=student_id, unit_id=course.units[1].id, completion=100),
        ]

        summary = aggregator.summarize(course, records)

        assert unit_id not in aggregator.index_progress(course, records)
        assert summary.by_unit[0].completion == 0.0
        assert summary.overall == 25.0

    def test_valid_record_after_out_of_range_one_is_kept(
        self, course, student_id
    ) -> None:
        unit_id = course.units[0].id
        bad = Progress(student_id=student_id, unit_id=unit_id, completion=150)
        good = Progress(student_id=student_id, unit_id=unit_id, completion=60)

        indexed = aggregator.index_progress(course, [bad, good])

        assert indexed[unit_id] is good


class TestLessonStatus:
    """Per-lesson status lookup within a unit record."""

    def test_first_matching_record(self, course, student_id) -> None:
        lesson_id = uuid4()
        first = LessonStatusRecord(lesson_id, LessonProgressStatus.COMPLETED.value)
        second = LessonStatusRecord(lesson_id, LessonProgressStatus.IN_PROGRESS.value)
        progress = Progress(
            student_id=student_id,
            unit_id=course.units[0].id,
            lessons=[first, second],
        )

        assert aggregator.lesson_status(progress, lesson_id) is first

    def test_unknown_status_is_skipped(self, course, student_id) -> None:
        lesson_id = uuid4()
        valid = LessonStatusRecord(lesson_id, LessonProgressStatus.IN_PROGRESS.value)
        progress = Progress(
            student_id=student_id,
            unit_id=course.units[0].id,
            lessons=[LessonStatusRecord(lesson_id, "in_progress"), valid],
        )

        assert aggregator.lesson_status(progress, lesson_id) is valid

    def test_only_unknown_status_defaults_to_not_started(
        self, course, student_id
    ) -> None:
        lesson_id = uuid4()
        progress = Progress(
            student_id=student_id,
            unit_id=course.units[0].id,
            lessons=[LessonStatusRecord(lesson_id, "DONE")],
        )

        record = aggregator.lesson_status(progress, lesson_id)

        assert record.status == LessonProgressStatus.NOT_STARTED.value
        assert record.lesson_id == lesson_id

    def test_missing_lesson_defaults_to_not_started(self, course, student_id) -> None:
        progress = Progress.empty(student_id, course.units[0].id)

        record = aggregator.lesson_status(progress, uuid4())

        assert record.status == LessonProgressStatus.NOT_STARTED.value


class TestTotalAssignments:
    """Tests for assignment lesson counting."""

    def test_counts_assignment_lessons_including_disabled(self, course) -> None:
        u1, u2 = course.units[0], course.units[1]
        u1.lessons = [
            Lesson(unit_id=u1.id, type=LessonType.ASSIGNMENT.value),
            Lesson(unit_id=u1.id, type=LessonType.LECTURE.value),
            Lesson(unit_id=u1.id, type=LessonType.ASSIGNMENT.value, enabled=False),
        ]
        u2.lessons = [Lesson(unit_id=u2.id, type=LessonType.ASSIGNMENT.value)]

        assert aggregator.total_assignments(course) == 3

    def test_no_lessons(self, course) -> None:
        assert aggregator.total_assignments(course) == 0
