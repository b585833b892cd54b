"""
All API endpoints for the exam ledger
Each endpoint resolves the caller, calls one store operation and serializes the result
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from exam_platform.core import courses, events, exams, registry, sessions
from exam_platform.core.auth import require_caller
from exam_platform.core.database import get_db
from exam_platform.core.models import (
    CourseCreateRequest, CourseOut, EventOut, ExamCreateRequest, ExamOut, ExamQuestions,
    ExamResult, RegisterRequest, RevisionView, TakeExamRequest, TakeExamResult, UserProfile
)

router = APIRouter()


@router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# ============================================================================
# Role Registry Endpoints
# ============================================================================

@router.post("/api/users", tags=["users"], response_model=UserProfile, status_code=201)
async def register_user(
    request: RegisterRequest,
    caller: str = Depends(require_caller),
    db: Session = Depends(get_db)
):
    """Register the caller as a tutor or a student. Profiles are permanent."""
    return UserProfile.model_validate(registry.register(db, caller, request.name, request.role))


@router.get("/api/me", tags=["users"], response_model=UserProfile)
async def get_me(caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    return UserProfile.model_validate(registry.get_profile(db, caller))


@router.get("/api/users/{identity}", tags=["users"], response_model=UserProfile)
async def get_user(identity: str, db: Session = Depends(get_db)):
    return UserProfile.model_validate(registry.get_profile(db, identity))


# ============================================================================
# Course Endpoints
# ============================================================================

@router.post("/api/courses", tags=["courses"], response_model=CourseOut, status_code=201)
async def create_course(
    request: CourseCreateRequest,
    caller: str = Depends(require_caller),
    db: Session = Depends(get_db)
):
    return CourseOut.model_validate(courses.create_course(db, caller, request.title))


@router.get("/api/courses", tags=["courses"], response_model=List[CourseOut])
async def list_courses(db: Session = Depends(get_db)):
    return [CourseOut.model_validate(c) for c in courses.list_courses(db)]


@router.get("/api/courses/{course_id}", tags=["courses"], response_model=CourseOut)
async def get_course(course_id: int, db: Session = Depends(get_db)):
    return CourseOut.model_validate(courses.get_course(db, course_id))


@router.post("/api/courses/{course_id}/enroll", tags=["courses"], status_code=201)
async def enroll(course_id: int, caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    courses.enroll(db, caller, course_id)
    return {"success": True, "course_id": course_id, "student": caller}


@router.get("/api/courses/{course_id}/exams", tags=["courses"], response_model=List[ExamOut])
async def list_course_exams(course_id: int, db: Session = Depends(get_db)):
    return [ExamOut.model_validate(e) for e in exams.list_course_exams(db, course_id)]


@router.get("/api/me/courses", tags=["courses"], response_model=List[CourseOut])
async def get_my_courses(caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    """Courses taught by the calling tutor"""
    return [CourseOut.model_validate(c) for c in courses.list_owned_courses(db, caller)]


@router.get("/api/me/enrollments", tags=["courses"], response_model=List[CourseOut])
async def get_my_enrollments(caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    """Courses the calling student is enrolled in"""
    return [CourseOut.model_validate(c) for c in courses.list_enrolled_courses(db, caller)]


# ============================================================================
# Exam Authoring Endpoints
# ============================================================================

@router.post("/api/exams", tags=["exams"], response_model=ExamOut, status_code=201)
async def create_exam(
    request: ExamCreateRequest,
    caller: str = Depends(require_caller),
    db: Session = Depends(get_db)
):
    exam = exams.create_exam(
        db,
        caller,
        request.course_id,
        request.title,
        request.question_texts,
        request.question_options,
        request.correct_answers,
    )
    return ExamOut.model_validate(exam)


@router.get("/api/exams/{exam_id}", tags=["exams"], response_model=ExamOut)
async def get_exam(exam_id: int, db: Session = Depends(get_db)):
    return ExamOut.model_validate(exams.get_exam(db, exam_id))


@router.get("/api/exams/{exam_id}/questions", tags=["exams"], response_model=ExamQuestions)
async def get_exam_questions(exam_id: int, db: Session = Depends(get_db)):
    """Question texts and options. Correct answers are never included."""
    texts, options = exams.get_exam_questions(db, exam_id)
    return ExamQuestions(exam_id=exam_id, texts=texts, options=options)


# ============================================================================
# Exam Session Endpoints
# ============================================================================

@router.post("/api/exams/{exam_id}/take", tags=["sessions"], response_model=TakeExamResult)
async def take_exam(
    exam_id: int,
    request: TakeExamRequest,
    caller: str = Depends(require_caller),
    db: Session = Depends(get_db)
):
    """Submit answers once. Re-submitting returns the first score unchanged."""
    return sessions.take_exam(db, caller, exam_id, request.answers)


@router.get("/api/exams/{exam_id}/revision", tags=["sessions"], response_model=RevisionView)
async def get_exam_revision(exam_id: int, caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    return sessions.get_past_exam_for_revision(db, caller, exam_id)


@router.get("/api/exams/{exam_id}/results/{student}", tags=["sessions"], response_model=ExamResult)
async def get_exam_result(
    exam_id: int,
    student: str,
    caller: str = Depends(require_caller),
    db: Session = Depends(get_db)
):
    return sessions.get_exam_result(db, caller, exam_id, student)


@router.get("/api/exams/{exam_id}/status", tags=["sessions"])
async def get_exam_status(exam_id: int, caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    completed = sessions.completion_status(db, caller, exam_id)
    return {"exam_id": exam_id, "student": caller, "completed": completed}


# ============================================================================
# Notification Log
# ============================================================================

@router.get("/api/events", tags=["events"], response_model=List[EventOut])
async def get_events(limit: int = 50, caller: str = Depends(require_caller), db: Session = Depends(get_db)):
    """Notification log. Completions are only listed for viewers allowed to see the result."""
    return [
        EventOut(id=e.id, name=e.name, payload=e.payload, created_at=e.created_at)
        for e in events.list_visible_events(db, caller, limit)
    ]
