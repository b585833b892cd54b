"""
Exam session state machine and the read models built on top of it

A session has two states, uncompleted (no row) and completed. Completed is
absorbing: once a student has a completed session for an exam, takeExam returns
the stored score and touches nothing.
"""
import json
import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy.orm import Session

from exam_platform.core import access, events, exams
from exam_platform.core.db_models import ExamSession
from exam_platform.core.errors import AuthorizationError, ValidationError
from exam_platform.core.ledger import ledger_transaction
from exam_platform.core.models import (
    AlreadyCompleted, ExamResult, Graded, RevisionQuestion, RevisionView, TakeExamResult
)

logger = logging.getLogger(__name__)


def get_session(db: Session, exam_id: int, student: str):
    return db.get(ExamSession, (exam_id, student))


def has_completed(db: Session, exam_id: int, student: str) -> bool:
    session = get_session(db, exam_id, student)
    return session is not None and session.completed


def completion_status(db: Session, caller: str, exam_id: int) -> bool:
    access.require_student(db, caller)
    exam = access.require_active_exam(db, exam_id)
    return has_completed(db, exam.id, caller)


def take_exam(db: Session, caller: str, exam_id: int, answers: Sequence[int]) -> TakeExamResult:
    """Grade the caller's answers once; later calls return the first score"""
    with ledger_transaction(db):
        access.require_student(db, caller)
        exam = access.require_active_exam(db, exam_id)
        access.require_enrolled(db, exam.course_id, caller)

        existing = get_session(db, exam.id, caller)
        if existing is not None and existing.completed:
            logger.info("Exam %s already completed by %s, returning stored score", exam.id, caller)
            return AlreadyCompleted(score=existing.score)

        if len(answers) != exam.question_count:
            raise ValidationError(
                f"Expected {exam.question_count} answers, got {len(answers)}"
            )
        for i, answer in enumerate(answers):
            exams.validate_option_index(answer, f"Answer {i}")

        questions = exams.get_questions(db, exam)
        score = sum(
            1 for question, answer in zip(questions, answers)
            if answer == question.correct_option
        )

        db.add(ExamSession(
            exam_id=exam.id,
            student_identity=caller,
            answers_json=json.dumps(list(answers)),
            score=score,
            completed=True,
            completed_at=datetime.utcnow(),
        ))
        events.emit(db, events.ExamCompleted(exam_id=exam.id, student=caller, score=score))

    logger.info("Exam %s graded for %s: %s/%s", exam_id, caller, score, len(answers))
    return Graded(score=score)


def get_past_exam_for_revision(db: Session, caller: str, exam_id: int) -> RevisionView:
    """Every question with the correct option next to the caller's answer"""
    access.require_student(db, caller)
    exam = access.require_active_exam(db, exam_id)
    access.require_enrolled(db, exam.course_id, caller)
    session = get_session(db, exam.id, caller)
    if session is None or not session.completed:
        raise AuthorizationError("You must complete the exam before reviewing it")

    submitted = session.answers
    questions = []
    for question in exams.get_questions(db, exam):
        student_answer = submitted[question.q_index]
        questions.append(RevisionQuestion(
            q_index=question.q_index,
            text=question.text,
            options=question.options,
            correct_option=question.correct_option,
            student_answer=student_answer,
            is_correct=student_answer == question.correct_option,
        ))

    return RevisionView(
        exam_id=exam.id,
        exam_title=exam.title,
        questions=questions,
        student_score=session.score,
        max_score=exam.question_count,
    )


def get_exam_result(db: Session, viewer: str, exam_id: int, student: str) -> ExamResult:
    exam = access.require_active_exam(db, exam_id)
    access.require_owner_or_self(db, viewer, student, course=exam.course)

    session = get_session(db, exam.id, student)
    if session is None or not session.completed:
        return ExamResult(
            exam_id=exam.id, student=student, completed=False,
            score=0, max_score=exam.question_count, answers=[],
        )
    return ExamResult(
        exam_id=exam.id,
        student=student,
        completed=True,
        score=session.score,
        max_score=exam.question_count,
        answers=session.answers,
        completed_at=session.completed_at,
    )
