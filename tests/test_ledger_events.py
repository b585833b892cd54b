import pytest

from exam_platform.core import courses, events, exams, sessions
from exam_platform.core.db_models import EventRecord, User
from exam_platform.core.events import ExamCompleted, ExamCreated
from exam_platform.core.errors import ValidationError
from exam_platform.core.ledger import RollbackOnlyError, ledger_transaction

from conftest import OTHER_STUDENT, SCENARIO_EXAM, STUDENT, TUTOR


def test_rollback_discards_writes_and_events(db, recorded_events):
    with pytest.raises(RuntimeError):
        with ledger_transaction(db):
            db.add(User(identity="0xGhost", name="Ghost", role="student"))
            events.emit(db, ExamCreated(exam_id=0, course_id=0, title="never"))
            raise RuntimeError("boom")

    assert db.get(User, "0xGhost") is None
    assert db.query(EventRecord).count() == 0
    assert recorded_events == []


def test_nested_units_commit_once(db, recorded_events):
    with ledger_transaction(db):
        with ledger_transaction(db):
            events.emit(db, ExamCreated(exam_id=1, course_id=0, title="inner"))
        assert recorded_events == []
    assert recorded_events == [ExamCreated(exam_id=1, course_id=0, title="inner")]


def test_failing_subscriber_does_not_undo_the_call(db, course):
    def broken(event):
        raise ValueError("subscriber down")

    events.subscribe(broken)
    try:
        exam = exams.create_exam(db, TUTOR, course.id, **SCENARIO_EXAM)
    finally:
        events.unsubscribe(broken)

    assert exams.get_exam(db, exam.id).title == "Scenario Exam"
    assert db.query(EventRecord).count() == 1


def test_event_log_newest_first(db, exam, enrolled):
    sessions.take_exam(db, STUDENT, exam.id, [2, 1])
    sessions.take_exam(db, STUDENT, exam.id, [0, 0])

    logged = events.list_events(db)
    assert [e.name for e in logged] == ["ExamCompleted", "ExamCreated"]
    assert logged[0].payload == ExamCompleted(exam_id=exam.id, student=STUDENT, score=1).model_dump()
    assert len(events.list_events(db, limit=1)) == 1


def test_caught_inner_failure_still_rolls_back(db, recorded_events):
    with pytest.raises(RollbackOnlyError):
        with ledger_transaction(db):
            db.add(User(identity="0xPartial", name="Partial", role="student"))
            events.emit(db, ExamCreated(exam_id=3, course_id=0, title="partial"))
            try:
                with ledger_transaction(db):
                    raise ValidationError("inner call rejected")
            except ValidationError:
                pass

    assert db.get(User, "0xPartial") is None
    assert db.query(EventRecord).count() == 0
    assert recorded_events == []

    # the next unit on the same session commits normally
    with ledger_transaction(db):
        db.add(User(identity="0xNext", name="Next", role="student"))
    assert db.get(User, "0xNext") is not None


def test_visible_events_follow_result_gate(db, exam, enrolled):
    courses.enroll(db, OTHER_STUDENT, exam.course_id)
    sessions.take_exam(db, STUDENT, exam.id, [2, 1])
    sessions.take_exam(db, OTHER_STUDENT, exam.id, [2, 0])

    def seen_by(viewer, limit=50):
        return [(e.name, e.payload.get("student")) for e in events.list_visible_events(db, viewer, limit)]

    assert seen_by(STUDENT) == [("ExamCompleted", STUDENT), ("ExamCreated", None)]
    assert seen_by(OTHER_STUDENT) == [("ExamCompleted", OTHER_STUDENT), ("ExamCreated", None)]
    assert [name for name, _ in seen_by(TUTOR)] == ["ExamCompleted", "ExamCompleted", "ExamCreated"]
    assert seen_by(STUDENT, limit=1) == [("ExamCompleted", STUDENT)]
    assert seen_by(STUDENT, limit=0) == []
