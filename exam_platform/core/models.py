"""
Pydantic data models for request/response validation
"""
from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


# ============================================================================
# Requests
# ============================================================================

class RegisterRequest(BaseModel):
    name: str
    role: str


class CourseCreateRequest(BaseModel):
    title: str


class ExamCreateRequest(BaseModel):
    """Request model for authoring an exam with its full question set"""
    course_id: int
    title: str
    question_texts: List[str]
    question_options: List[List[str]]
    correct_answers: List[int]


class TakeExamRequest(BaseModel):
    answers: List[int]


# ============================================================================
# Responses
# ============================================================================

class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identity: str
    name: str
    role: str


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    owner_identity: str
    owner_name: str
    active: bool


class ExamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    title: str
    question_count: int
    active: bool
    creator_identity: str


class ExamQuestions(BaseModel):
    exam_id: int
    texts: List[str]
    options: List[List[str]]


class Graded(BaseModel):
    """takeExam graded a fresh submission"""
    outcome: Literal["graded"] = "graded"
    score: int


class AlreadyCompleted(BaseModel):
    """takeExam found a completed session and returned its stored score"""
    outcome: Literal["already_completed"] = "already_completed"
    score: int


TakeExamResult = Union[Graded, AlreadyCompleted]


class RevisionQuestion(BaseModel):
    q_index: int
    text: str
    options: List[str]
    correct_option: int
    student_answer: int
    is_correct: bool


class RevisionView(BaseModel):
    """A completed exam laid out for review, question by question"""
    exam_id: int
    exam_title: str
    questions: List[RevisionQuestion]
    student_score: int
    max_score: int


class ExamResult(BaseModel):
    exam_id: int
    student: str
    completed: bool
    score: int
    max_score: int
    answers: List[int]
    completed_at: Optional[datetime] = None


class EventOut(BaseModel):
    id: int
    name: str
    payload: dict
    created_at: datetime
