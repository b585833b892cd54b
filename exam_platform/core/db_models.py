"""
SQLAlchemy ORM models for the exam ledger
"""
import json
from datetime import datetime

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
)
from sqlalchemy.orm import relationship

from exam_platform.core.database import Base

ROLE_TUTOR = "tutor"
ROLE_STUDENT = "student"
ROLES = (ROLE_TUTOR, ROLE_STUDENT)

OPTION_COUNT = 4


class User(Base):
    """Registered profile, one per caller identity. Never updated or deleted."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('tutor','student')", name="ck_users_role"),
    )

    identity = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class IdSequence(Base):
    """Backing row of a dense id sequence"""
    __tablename__ = "id_sequences"

    name = Column(String, primary_key=True)
    next_value = Column(Integer, nullable=False, default=0)


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String, nullable=False)
    owner_identity = Column(String, ForeignKey("users.identity"), nullable=False, index=True)
    owner_name = Column(String, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    exams = relationship("Exam", back_populates="course", order_by="Exam.id")


class Enrollment(Base):
    __tablename__ = "enrollments"

    course_id = Column(Integer, ForeignKey("courses.id"), primary_key=True)
    student_identity = Column(String, ForeignKey("users.identity"), primary_key=True, index=True)
    enrolled_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, autoincrement=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    question_count = Column(Integer, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    creator_identity = Column(String, ForeignKey("users.identity"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    course = relationship("Course", back_populates="exams")
    questions = relationship("Question", order_by="Question.q_index")


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("correct_option BETWEEN 0 AND 3", name="ck_questions_correct_option"),
        CheckConstraint("q_index >= 0", name="ck_questions_q_index"),
    )

    exam_id = Column(Integer, ForeignKey("exams.id"), primary_key=True)
    q_index = Column(Integer, primary_key=True, autoincrement=False)
    text = Column(Text, nullable=False)
    option_0 = Column(Text, nullable=False)
    option_1 = Column(Text, nullable=False)
    option_2 = Column(Text, nullable=False)
    option_3 = Column(Text, nullable=False)
    correct_option = Column(Integer, nullable=False)

    @property
    def options(self):
        return [self.option_0, self.option_1, self.option_2, self.option_3]


class ExamSession(Base):
    """One student's attempt at one exam. Written once, on completion."""
    __tablename__ = "exam_sessions"

    exam_id = Column(Integer, ForeignKey("exams.id"), primary_key=True)
    student_identity = Column(String, ForeignKey("users.identity"), primary_key=True, index=True)
    answers_json = Column(Text, nullable=False, default="[]")
    score = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    @property
    def answers(self):
        return json.loads(self.answers_json or "[]")


class EventRecord(Base):
    """Persisted copy of every notification emitted by a committed call"""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    payload_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def payload(self):
        return json.loads(self.payload_json)
