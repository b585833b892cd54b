"""
Seed data script - Creates a demo tutor, student, course and exam
Run this after database initialization. Safe to run more than once.
"""
import sys
import os

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from exam_platform.core import courses, exams, registry
from exam_platform.core.config import CALLER_HEADER
from exam_platform.core.database import SessionLocal, init_db
from exam_platform.core.db_models import Course, ROLE_STUDENT, ROLE_TUTOR

DEMO_TUTOR = "tutor-demo"
DEMO_STUDENT = "student-demo"
DEMO_COURSE_TITLE = "Introduction to Python"

DEMO_EXAM = {
    "title": "Python Basics Quiz",
    "question_texts": [
        "Which keyword defines a function?",
        "What does len([1, 2, 3]) return?",
    ],
    "question_options": [
        ["func", "fn", "def", "lambda"],
        ["3", "2", "[1, 2, 3]", "None"],
    ],
    "correct_answers": [2, 0],
}


def seed_initial_data(db):
    """Create demo users, course and exam unless they already exist"""
    print("=" * 60)
    print("Seeding initial database data...")
    print("=" * 60)

    for identity, name, role in (
        (DEMO_TUTOR, "Demo Tutor", ROLE_TUTOR),
        (DEMO_STUDENT, "Demo Student", ROLE_STUDENT),
    ):
        if not registry.is_registered(db, identity):
            registry.register(db, identity, name, role)
            print(f"[OK] Registered {role}: {identity}")
        else:
            print(f"[OK] {role.capitalize()} already registered: {identity}")

    course = db.query(Course).filter(
        Course.owner_identity == DEMO_TUTOR,
        Course.title == DEMO_COURSE_TITLE
    ).first()
    if not course:
        course = courses.create_course(db, DEMO_TUTOR, DEMO_COURSE_TITLE)
        print(f"[OK] Created course {course.id}: {course.title}")
    else:
        print(f"[OK] Course already exists: {course.id}")

    if not any(exam.title == DEMO_EXAM["title"] for exam in course.exams):
        exam = exams.create_exam(db, DEMO_TUTOR, course.id, **DEMO_EXAM)
        print(f"[OK] Created exam {exam.id}: {exam.title}")
    else:
        print("[OK] Demo exam already exists")

    if not courses.is_enrolled(db, course.id, DEMO_STUDENT):
        courses.enroll(db, DEMO_STUDENT, course.id)
        print(f"[OK] Enrolled {DEMO_STUDENT} in course {course.id}")
    else:
        print(f"[OK] {DEMO_STUDENT} already enrolled")

    print("=" * 60)
    print(f"Seeding complete. Send requests with the header {CALLER_HEADER} set to")
    print(f"  {DEMO_TUTOR}   (tutor)")
    print(f"  {DEMO_STUDENT} (student)")
    print("=" * 60)


if __name__ == "__main__":
    init_db()
    db = SessionLocal()
    try:
        seed_initial_data(db)
    finally:
        db.close()
