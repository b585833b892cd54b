"""
Course store: course metadata and enrollment sets
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from exam_platform.core import access, sequences
from exam_platform.core.db_models import Course, Enrollment
from exam_platform.core.errors import NotFoundError, StateConflictError, ValidationError
from exam_platform.core.ledger import ledger_transaction

logger = logging.getLogger(__name__)


def exists(db: Session, course_id: int) -> bool:
    return db.get(Course, course_id) is not None


def is_active(db: Session, course_id: int) -> bool:
    course = db.get(Course, course_id)
    return course is not None and course.active


def owner_of(db: Session, course_id: int) -> str:
    return access.require_active_course(db, course_id).owner_identity


def is_enrolled(db: Session, course_id: int, identity: str) -> bool:
    return db.get(Enrollment, (course_id, identity)) is not None


def get_course(db: Session, course_id: int) -> Course:
    return access.require_active_course(db, course_id)


def create_course(db: Session, caller: str, title: str) -> Course:
    with ledger_transaction(db):
        tutor = access.require_tutor(db, caller)
        if not title or not title.strip():
            raise ValidationError("Course title cannot be empty")

        course = Course(
            id=sequences.course_ids.next(db),
            title=title,
            owner_identity=tutor.identity,
            owner_name=tutor.name,
            active=True,
        )
        db.add(course)
        db.flush()

    logger.info("Course %s created by %s", course.id, caller)
    return course


def enroll(db: Session, caller: str, course_id: int) -> Enrollment:
    with ledger_transaction(db):
        access.require_student(db, caller)
        access.require_active_course(db, course_id)
        if is_enrolled(db, course_id, caller):
            raise StateConflictError("Already enrolled in this course")

        enrollment = Enrollment(course_id=course_id, student_identity=caller)
        db.add(enrollment)
        db.flush()

    logger.info("%s enrolled in course %s", caller, course_id)
    return enrollment


def set_course_active(db: Session, course_id: int, active: bool) -> Course:
    """Toggle for code outside the core; the core itself only reads the flag"""
    with ledger_transaction(db):
        course = db.get(Course, course_id)
        if course is None:
            raise NotFoundError("Course not found")
        course.active = active
    return course


def list_courses(db: Session) -> List[Course]:
    return db.query(Course).filter(Course.active.is_(True)).order_by(Course.id).all()


def list_owned_courses(db: Session, caller: str) -> List[Course]:
    access.require_tutor(db, caller)
    return db.query(Course).filter(
        Course.owner_identity == caller,
        Course.active.is_(True)
    ).order_by(Course.id).all()


def list_enrolled_courses(db: Session, caller: str) -> List[Course]:
    access.require_student(db, caller)
    return db.query(Course).join(
        Enrollment, Enrollment.course_id == Course.id
    ).filter(
        Enrollment.student_identity == caller,
        Course.active.is_(True)
    ).order_by(Course.id).all()
