"""
Exam authoring store

An exam is created together with its whole question set. Everything is validated
before the first write, so a rejected createExam consumes no exam id and leaves
no question rows behind.
"""
import logging
from typing import List, Sequence, Tuple

from sqlalchemy.orm import Session

from exam_platform.core import access, events, sequences
from exam_platform.core.db_models import Exam, Question, OPTION_COUNT
from exam_platform.core.errors import NotFoundError, ValidationError
from exam_platform.core.ledger import ledger_transaction

logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_option_index(value, what: str):
    # bool is an int subclass; True/False are not option indices
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < OPTION_COUNT:
        raise ValidationError(f"{what} must be an integer between 0 and {OPTION_COUNT - 1}")


def validate_question_set(
    question_texts: Sequence[str],
    question_options: Sequence[Sequence[str]],
    correct_answers: Sequence[int],
):
    if not question_texts:
        raise ValidationError("An exam needs at least one question")
    if not (len(question_texts) == len(question_options) == len(correct_answers)):
        raise ValidationError("Questions, options and correct answers must have the same length")

    for i, text in enumerate(question_texts):
        if _is_blank(text):
            raise ValidationError(f"Question {i} text cannot be empty")
        options = question_options[i]
        if len(options) != OPTION_COUNT:
            raise ValidationError(f"Question {i} must have exactly {OPTION_COUNT} options")
        if any(_is_blank(option) for option in options):
            raise ValidationError(f"Question {i} options cannot be empty")
        validate_option_index(correct_answers[i], f"Correct answer of question {i}")


def create_exam(
    db: Session,
    caller: str,
    course_id: int,
    title: str,
    question_texts: Sequence[str],
    question_options: Sequence[Sequence[str]],
    correct_answers: Sequence[int],
) -> Exam:
    """Create an exam on a course the caller owns, with all of its questions"""
    with ledger_transaction(db):
        access.require_tutor(db, caller)
        course = access.require_active_course(db, course_id)
        access.require_course_owner(course, caller)
        if _is_blank(title):
            raise ValidationError("Exam title cannot be empty")
        validate_question_set(question_texts, question_options, correct_answers)

        exam = Exam(
            id=sequences.exam_ids.next(db),
            course_id=course.id,
            title=title,
            question_count=len(question_texts),
            active=True,
            creator_identity=caller,
        )
        db.add(exam)
        db.flush()

        for q_index, text in enumerate(question_texts):
            options = list(question_options[q_index])
            db.add(Question(
                exam_id=exam.id,
                q_index=q_index,
                text=text,
                option_0=options[0],
                option_1=options[1],
                option_2=options[2],
                option_3=options[3],
                correct_option=correct_answers[q_index],
            ))

        events.emit(db, events.ExamCreated(exam_id=exam.id, course_id=course.id, title=title))

    logger.info("Exam %s created on course %s with %s questions", exam.id, course.id, exam.question_count)
    return exam


def get_exam(db: Session, exam_id: int) -> Exam:
    return access.require_active_exam(db, exam_id)


def get_questions(db: Session, exam: Exam) -> List[Question]:
    return db.query(Question).filter(
        Question.exam_id == exam.id
    ).order_by(Question.q_index).all()


def get_exam_questions(db: Session, exam_id: int) -> Tuple[List[str], List[List[str]]]:
    """Question texts and options of an active exam. Correct answers stay hidden."""
    exam = access.require_active_exam(db, exam_id)
    questions = get_questions(db, exam)
    return [q.text for q in questions], [q.options for q in questions]


def list_course_exams(db: Session, course_id: int) -> List[Exam]:
    course = access.require_active_course(db, course_id)
    return [exam for exam in course.exams if exam.active]


def set_exam_active(db: Session, exam_id: int, active: bool) -> Exam:
    """Toggle for code outside the core; the core itself only reads the flag"""
    with ledger_transaction(db):
        exam = db.get(Exam, exam_id)
        if exam is None:
            raise NotFoundError("Exam not found")
        exam.active = active
    return exam
