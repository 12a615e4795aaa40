"""Shared fixtures: in-memory stores, a seeded portal and an API client."""

import copy
import os
from collections import defaultdict
from collections.abc import Iterable
from types import SimpleNamespace
from uuid import UUID

import pytest


os.environ.setdefault("ENVIRONMENT", "testing")

from fastapi.testclient import TestClient  # noqa: E402

from portal.auth.security import create_access_token, hash_password  # noqa: E402
from portal.auth.service import StudentAuthService  # noqa: E402
from portal.curriculum.models import (  # noqa: E402
    Course,
    Lesson,
    LessonAccessPath,
    LessonType,
    Resource,
    ResourceType,
    Unit,
)
from portal.curriculum.store import count_unsubmitted  # noqa: E402
from portal.enrollment.models import (  # noqa: E402
    Group,
    Student,
    StudentEnrollment,
    StudentStatus,
)
from portal.progress.models import (  # noqa: E402
    LessonProgressStatus,
    LessonStatusRecord,
    Progress,
)
from portal.student.service import StudentViewService  # noqa: E402


PASSWORD = "secret123"


# ==============================================================================
# In-memory stores
# ==============================================================================


class InMemoryEnrollmentStore:
    """Enrollment store kept in dictionaries."""

    def __init__(self):
        self.students: dict[UUID, Student] = {}
        self.groups: dict[UUID, Group] = {}
        self.courses: dict[UUID, Course] = {}
        self.course_groups: dict[UUID, list[UUID]] = defaultdict(list)

    async def get_student(self, student_id: UUID) -> Student | None:
        return self.students.get(student_id)

    async def get_student_by_email(self, email: str) -> Student | None:
        email = email.lower().strip()
        return next((s for s in self.students.values() if s.email == email), None)

    async def get_student_with_enrollment(
        self, student_id: UUID
    ) -> StudentEnrollment | None:
        student = self.students.get(student_id)
        if not student:
            return None
        group = self.groups.get(student.group_id)
        course = self.courses.get(student.course_id)
        if not group or not course:
            return None
        return StudentEnrollment(student=student, group=group, course=course)

    async def get_group_by_code(self, group_code: str) -> Group | None:
        return next(
            (g for g in self.groups.values() if g.group_code == group_code), None
        )

    async def get_course_by_code(self, course_code: str) -> Course | None:
        return next(
            (c for c in self.courses.values() if c.course_code == course_code), None
        )

    async def get_course_group_ids(self, course_id: UUID) -> list[UUID]:
        return list(self.course_groups[course_id])

    async def create_student(self, student: Student) -> None:
        self.students[student.id] = student

    async def update_student_password(self, student_id: UUID, password_hash: str) -> None:
        self.students[student_id].password_hash = password_hash


class InMemoryCurriculumStore:
    """Curriculum store over in-memory courses and submissions."""

    def __init__(self, enrollment_store: InMemoryEnrollmentStore):
        self.enrollment_store = enrollment_store
        self.submissions: set[tuple[UUID, UUID]] = set()

    def _units(self) -> list[Unit]:
        return [u for c in self.enrollment_store.courses.values() for u in c.units]

    async def get_course_structure(
        self, course_id: UUID, enabled_only: bool = False
    ) -> Course | None:
        course = self.enrollment_store.courses.get(course_id)
        if not course:
            return None
        course = copy.deepcopy(course)
        for unit in course.units:
            lessons = [l for l in unit.lessons if l.enabled or not enabled_only]
            unit.lessons = sorted(lessons, key=lambda l: l.order)
        return course

    async def count_pending_assignments(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> int:
        wanted = set(unit_ids)
        resources = [
            r
            for u in self._units()
            if u.id in wanted
            for l in u.lessons
            for r in l.resources
        ]
        submitted = {rid for sid, rid in self.submissions if sid == student_id}
        return count_unsubmitted(resources, submitted)

    async def resolve_lesson_access_path(
        self, lesson_id: UUID, student_id: UUID
    ) -> LessonAccessPath | None:
        for unit in self._units():
            for lesson in unit.lessons:
                if lesson.id != lesson_id:
                    continue
                student = await self.enrollment_store.get_student(student_id)
                groups = await self.enrollment_store.get_course_group_ids(
                    unit.course_id
                )
                return LessonAccessPath(
                    lesson=lesson,
                    course_id=unit.course_id,
                    accessible_group_ids=[
                        g for g in groups if student and g == student.group_id
                    ],
                )
        return None


class InMemoryProgressStore:
    """Progress store over a list of records."""

    def __init__(self):
        self.records: list[Progress] = []

    async def get_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID] | None = None
    ) -> list[Progress]:
        wanted = set(unit_ids) if unit_ids is not None else None
        return [
            r
            for r in self.records
            if r.student_id == student_id and (wanted is None or r.unit_id in wanted)
        ]

    async def create_initial_progress(
        self, student_id: UUID, unit_ids: Iterable[UUID]
    ) -> list[Progress]:
        created = [Progress(student_id=student_id, unit_id=u) for u in unit_ids]
        self.records.extend(created)
        return created


# ==============================================================================
# Seeded portal
# ==============================================================================


@pytest.fixture
def password() -> str:
    """Password of every seeded student."""
    return PASSWORD


@pytest.fixture
def enrollment_store() -> InMemoryEnrollmentStore:
    return InMemoryEnrollmentStore()


@pytest.fixture
def curriculum_store(enrollment_store) -> InMemoryCurriculumStore:
    return InMemoryCurriculumStore(enrollment_store)


@pytest.fixture
def progress_store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def portal(enrollment_store, curriculum_store, progress_store) -> SimpleNamespace:
    """A course linked to group G1 with two units.

    Unit U1 (position 0):
        - "Intro" order 2, LECTURE, resources: assignment R1, document R2
        - "Basics" order 1, READING
        - "Draft" order 0, ASSIGNMENT, disabled
    Unit U2 (position 1):
        - "Project" order 1, ASSIGNMENT, resource: assignment R3

    ``student`` is ACTIVE in G1 with U1 = 100 and U2 = 40.
    ``outsider`` is ACTIVE in G2 (not linked to the course).
    ``pending_student`` is PENDING in G1.
    """
    course = Course(course_code="CS101", title="Computer Science", type="DIPLOMA")
    u1 = Unit(
        course_id=course.id,
        unit_code="U1",
        unit_name="Foundations",
        term="T1",
        nature="CORE",
        position=0,
    )
    u2 = Unit(course_id=course.id, unit_code="U2", unit_name="Practice", position=1)

    intro = Lesson(unit_id=u1.id, title="Intro", description="Welcome", order=2)
    basics = Lesson(
        unit_id=u1.id, title="Basics", order=1, type=LessonType.READING.value
    )
    draft = Lesson(
        unit_id=u1.id,
        title="Draft",
        order=0,
        enabled=False,
        type=LessonType.ASSIGNMENT.value,
    )
    project = Lesson(
        unit_id=u2.id, title="Project", order=1, type=LessonType.ASSIGNMENT.value
    )

    r1 = Resource(
        unit_id=u1.id,
        lesson_id=intro.id,
        type=ResourceType.ASSIGNMENT.value,
        title="Essay",
        url="https://files.example.com/essay.pdf",
    )
    r2 = Resource(
        unit_id=u1.id,
        lesson_id=intro.id,
        type=ResourceType.DOCUMENT.value,
        title="Slides",
        url="https://files.example.com/slides.pdf",
    )
    r3 = Resource(
        unit_id=u2.id,
        lesson_id=project.id,
        type=ResourceType.ASSIGNMENT.value,
        title="Project brief",
    )
    intro.resources = [r1, r2]
    project.resources = [r3]
    u1.lessons = [intro, basics, draft]
    u2.lessons = [project]
    course.units = [u1, u2]

    g1 = Group(group_code="G1", name="Morning")
    g2 = Group(group_code="G2", name="Evening")

    password_hash = hash_password(PASSWORD)
    student = Student(
        group_id=g1.id,
        course_id=course.id,
        full_name="Ada Lovelace",
        email="ada@example.com",
        password_hash=password_hash,
        type="FULL_TIME",
        status=StudentStatus.ACTIVE.value,
    )
    outsider = Student(
        group_id=g2.id,
        course_id=course.id,
        full_name="Grace Hopper",
        email="grace@example.com",
        password_hash=password_hash,
        type="PART_TIME",
        status=StudentStatus.ACTIVE.value,
    )
    pending_student = Student(
        group_id=g1.id,
        course_id=course.id,
        full_name="Alan Turing",
        email="alan@example.com",
        password_hash=password_hash,
        type="FULL_TIME",
    )

    enrollment_store.courses[course.id] = course
    enrollment_store.groups.update({g1.id: g1, g2.id: g2})
    enrollment_store.course_groups[course.id].append(g1.id)
    for s in (student, outsider, pending_student):
        enrollment_store.students[s.id] = s

    progress_store.records.extend(
        [
            Progress(
                student_id=student.id,
                unit_id=u1.id,
                completion=100.0,
                lessons=[
                    LessonStatusRecord(
                        lesson_id=intro.id,
                        status=LessonProgressStatus.COMPLETED.value,
                    ),
                    LessonStatusRecord(
                        lesson_id=basics.id,
                        status=LessonProgressStatus.IN_PROGRESS.value,
                    ),
                ],
            ),
            Progress(student_id=student.id, unit_id=u2.id, completion=40.0),
        ]
    )

    return SimpleNamespace(
        course=course,
        u1=u1,
        u2=u2,
        intro=intro,
        basics=basics,
        draft=draft,
        project=project,
        r1=r1,
        r2=r2,
        r3=r3,
        g1=g1,
        g2=g2,
        student=student,
        outsider=outsider,
        pending_student=pending_student,
    )


@pytest.fixture
def view_service(enrollment_store, curriculum_store, progress_store):
    return StudentViewService(enrollment_store, curriculum_store, progress_store)


@pytest.fixture
def auth_service(enrollment_store, curriculum_store, progress_store):
    return StudentAuthService(enrollment_store, curriculum_store, progress_store)


# ==============================================================================
# API client
# ==============================================================================


@pytest.fixture
def client(auth_service, view_service):
    """Test client with services over the in-memory stores.

    The lifespan is not run, so no database connection is attempted.
    """
    from portal.main import app

    app.state.auth_service = auth_service
    app.state.student_view_service = view_service
    yield TestClient(app)
    app.state.auth_service = None
    app.state.student_view_service = None


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a student."""

    def _headers(student: Student) -> dict[str, str]:
        token = create_access_token({"sub": str(student.id), "email": student.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers
