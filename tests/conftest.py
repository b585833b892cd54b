import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before the package creates its engine
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient

from exam_platform.core import courses, db_models, events, registry  # noqa: F401
from exam_platform.core.database import Base, SessionLocal, engine
from exam_platform.main import app

TUTOR = "0xTutor"
OTHER_TUTOR = "0xOtherTutor"
STUDENT = "0xStudent"
OTHER_STUDENT = "0xOtherStudent"

SCENARIO_EXAM = {
    "title": "Scenario Exam",
    "question_texts": ["Pick the third option", "Pick the first option"],
    "question_options": [["a", "b", "c", "d"], ["e", "f", "g", "h"]],
    "correct_answers": [2, 0],
}


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def recorded_events():
    received = []
    events.subscribe(received.append)
    yield received
    events.unsubscribe(received.append)


@pytest.fixture
def users(db):
    registry.register(db, TUTOR, "Tina Tutor", "tutor")
    registry.register(db, OTHER_TUTOR, "Otto Tutor", "tutor")
    registry.register(db, STUDENT, "Sam Student", "student")
    registry.register(db, OTHER_STUDENT, "Sue Student", "student")


@pytest.fixture
def course(db, users):
    return courses.create_course(db, TUTOR, "Course C")


@pytest.fixture
def exam(db, course):
    from exam_platform.core import exams
    return exams.create_exam(db, TUTOR, course.id, **SCENARIO_EXAM)


@pytest.fixture
def enrolled(db, course):
    return courses.enroll(db, STUDENT, course.id)
