"""
Notifications emitted by committed calls

Events are recorded in the `events` table inside the caller's unit of work and
handed to subscribers only after that unit commits. Delivery is informational:
a failing subscriber is logged and never retried.
"""
import json
import logging
from typing import Callable, List, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from exam_platform.core import access
from exam_platform.core.db_models import EventRecord, Exam
from exam_platform.core.errors import AuthorizationError

logger = logging.getLogger(__name__)

PENDING_KEY = "pending_events"


class ExamCreated(BaseModel):
    exam_id: int
    course_id: int
    title: str


class ExamCompleted(BaseModel):
    exam_id: int
    student: str
    score: int


Event = Union[ExamCreated, ExamCompleted]

_subscribers: List[Callable[[Event], None]] = []


def subscribe(handler: Callable[[Event], None]):
    if handler not in _subscribers:
        _subscribers.append(handler)


def unsubscribe(handler: Callable[[Event], None]):
    if handler in _subscribers:
        _subscribers.remove(handler)


def emit(db: Session, event: Event):
    """Record an event in the current unit and queue it for post-commit delivery"""
    db.add(EventRecord(name=type(event).__name__, payload_json=json.dumps(event.model_dump())))
    db.info.setdefault(PENDING_KEY, []).append(event)


def take_pending(db: Session) -> List[Event]:
    return db.info.pop(PENDING_KEY, [])


def dispatch(events: List[Event]):
    for event in events:
        logger.info("%s %s", type(event).__name__, event.model_dump())
        for handler in list(_subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", handler, type(event).__name__)


def list_events(db: Session, limit: int = 50) -> List[EventRecord]:
    """Newest first"""
    return db.query(EventRecord).order_by(EventRecord.id.desc()).limit(max(limit, 0)).all()


def _can_see(db: Session, viewer: str, record: EventRecord) -> bool:
    """ExamCompleted carries a student's score, so it follows the result gate"""
    if record.name != ExamCompleted.__name__:
        return True
    payload = record.payload
    exam = db.get(Exam, payload["exam_id"])
    try:
        access.require_owner_or_self(db, viewer, payload["student"], course=exam.course if exam else None)
    except AuthorizationError:
        return False
    return True


def list_visible_events(db: Session, viewer: str, limit: int = 50) -> List[EventRecord]:
    """Newest first, leaving out completions the viewer may not see"""
    visible = []
    if limit <= 0:
        return visible
    for record in db.query(EventRecord).order_by(EventRecord.id.desc()):
        if _can_see(db, viewer, record):
            visible.append(record)
            if len(visible) >= limit:
                break
    return visible
