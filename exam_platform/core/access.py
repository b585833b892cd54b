"""
Access gate: predicates guarding every store operation

Each require_* returns the record it checked so callers don't look it up twice,
and raises an ExamPlatformError subclass otherwise.
"""
from typing import Optional

from sqlalchemy.orm import Session

from exam_platform.core import config
from exam_platform.core.db_models import (
    Course, Enrollment, Exam, User, ROLE_STUDENT, ROLE_TUTOR
)
from exam_platform.core.errors import AuthorizationError, NotFoundError


def _require_role(db: Session, identity: str, role: str) -> User:
    user = db.get(User, identity) if identity else None
    if user is None:
        raise AuthorizationError("Caller is not registered")
    if user.role != role:
        raise AuthorizationError(f"Only a registered {role} can do this")
    return user


def require_tutor(db: Session, identity: str) -> User:
    return _require_role(db, identity, ROLE_TUTOR)


def require_student(db: Session, identity: str) -> User:
    return _require_role(db, identity, ROLE_STUDENT)


def require_active_course(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None or not course.active:
        raise NotFoundError("Course not found")
    return course


def require_active_exam(db: Session, exam_id: int) -> Exam:
    exam = db.get(Exam, exam_id)
    if exam is None or not exam.active:
        raise NotFoundError("Exam not found")
    return exam


def require_course_owner(course: Course, identity: str):
    if course.owner_identity != identity:
        raise AuthorizationError("Only the course tutor can do this")


def require_enrolled(db: Session, course_id: int, identity: str) -> Enrollment:
    enrollment = db.get(Enrollment, (course_id, identity))
    if enrollment is None:
        raise AuthorizationError("Student is not enrolled in this course")
    return enrollment


def require_owner_or_self(db: Session, viewer: str, subject: str, course: Optional[Course] = None):
    """
    The subject may always read their own results. Tutors are admitted according
    to RESULTS_TUTOR_SCOPE: any registered tutor ("any"), or only the tutor owning
    `course` ("owner").
    """
    if viewer and viewer == subject:
        return
    user = db.get(User, viewer) if viewer else None
    if user is None or user.role != ROLE_TUTOR:
        raise AuthorizationError("Not allowed to view these results")
    if config.RESULTS_TUTOR_SCOPE != "any":
        if course is None:
            raise AuthorizationError("Not allowed to view these results")
        require_course_owner(course, viewer)
