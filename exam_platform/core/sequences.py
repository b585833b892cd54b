"""
Dense id sequences for courses and exams
"""
from sqlalchemy.orm import Session

from exam_platform.core.db_models import IdSequence


class SequenceGenerator:
    """Hands out 0, 1, 2, ... for one name. Must be called inside a ledger unit."""

    def __init__(self, name: str):
        self.name = name

    def next(self, db: Session) -> int:
        row = db.get(IdSequence, self.name)
        if row is None:
            row = IdSequence(name=self.name, next_value=0)
            db.add(row)
        value = row.next_value
        row.next_value = value + 1
        db.flush()
        return value

    def current(self, db: Session) -> int:
        """Next value that would be handed out, without allocating it"""
        row = db.get(IdSequence, self.name)
        return row.next_value if row is not None else 0


course_ids = SequenceGenerator("course")
exam_ids = SequenceGenerator("exam")
