import pytest

from exam_platform.core import courses, exams, registry, sequences
from exam_platform.core.errors import (
    AuthorizationError, NotFoundError, StateConflictError, ValidationError
)

from conftest import OTHER_STUDENT, OTHER_TUTOR, SCENARIO_EXAM, STUDENT, TUTOR


def test_register_creates_profile(db):
    user = registry.register(db, "0xA", "Alice", "tutor")
    assert user.name == "Alice"
    assert registry.is_registered(db, "0xA")
    assert registry.role_of(db, "0xA") == "tutor"
    assert not registry.is_registered(db, "0xB")


def test_register_twice_is_a_conflict(db):
    registry.register(db, "0xA", "Alice", "student")
    with pytest.raises(StateConflictError):
        registry.register(db, "0xA", "Alice Again", "tutor")
    assert registry.get_profile(db, "0xA").role == "student"


@pytest.mark.parametrize("name,role", [("", "tutor"), ("   ", "student"), ("Bob", "admin")])
def test_register_rejects_bad_input(db, name, role):
    with pytest.raises(ValidationError):
        registry.register(db, "0xB", name, role)
    assert not registry.is_registered(db, "0xB")


def test_unknown_profile_is_not_found(db):
    with pytest.raises(NotFoundError):
        registry.get_profile(db, "0xNobody")


def test_only_tutors_create_courses(db, users):
    with pytest.raises(AuthorizationError):
        courses.create_course(db, STUDENT, "Nope")
    with pytest.raises(AuthorizationError):
        courses.create_course(db, "0xUnregistered", "Nope")
    with pytest.raises(ValidationError):
        courses.create_course(db, TUTOR, "")
    assert sequences.course_ids.current(db) == 0


def test_course_snapshot_of_owner(db, course):
    assert course.id == 0
    assert course.owner_identity == TUTOR
    assert course.owner_name == "Tina Tutor"
    assert course.active is True
    assert courses.owner_of(db, course.id) == TUTOR


def test_course_ids_are_dense_with_interleaved_exams(db, users):
    created = []
    for i in range(5):
        course = courses.create_course(db, TUTOR if i % 2 == 0 else OTHER_TUTOR, f"Course {i}")
        created.append(course.id)
        owner = TUTOR if i % 2 == 0 else OTHER_TUTOR
        exams.create_exam(db, owner, course.id, **SCENARIO_EXAM)
        with pytest.raises(ValidationError):
            courses.create_course(db, TUTOR, " ")

    assert created == [0, 1, 2, 3, 4]
    assert [c.id for c in courses.list_courses(db)] == [0, 1, 2, 3, 4]
    assert sequences.exam_ids.current(db) == 5


def test_enroll(db, course):
    courses.enroll(db, STUDENT, course.id)
    assert courses.is_enrolled(db, course.id, STUDENT)
    assert not courses.is_enrolled(db, course.id, OTHER_STUDENT)


def test_enroll_twice_is_a_conflict(db, course):
    courses.enroll(db, STUDENT, course.id)
    with pytest.raises(StateConflictError):
        courses.enroll(db, STUDENT, course.id)


def test_enroll_requires_student_and_active_course(db, course):
    with pytest.raises(AuthorizationError):
        courses.enroll(db, TUTOR, course.id)
    with pytest.raises(NotFoundError):
        courses.enroll(db, STUDENT, 99)

    courses.set_course_active(db, course.id, False)
    with pytest.raises(NotFoundError):
        courses.enroll(db, STUDENT, course.id)
    with pytest.raises(NotFoundError):
        courses.get_course(db, course.id)
    assert courses.exists(db, course.id)
    assert not courses.is_active(db, course.id)


def test_course_projections(db, course):
    other = courses.create_course(db, OTHER_TUTOR, "Course D")
    courses.create_course(db, TUTOR, "Course E")
    courses.enroll(db, STUDENT, other.id)

    assert [c.title for c in courses.list_owned_courses(db, TUTOR)] == ["Course C", "Course E"]
    assert [c.id for c in courses.list_enrolled_courses(db, STUDENT)] == [other.id]
    assert courses.list_enrolled_courses(db, OTHER_STUDENT) == []

    with pytest.raises(AuthorizationError):
        courses.list_owned_courses(db, STUDENT)
    with pytest.raises(AuthorizationError):
        courses.list_enrolled_courses(db, TUTOR)
