"""
Serializable units of work against the shared ledger

Usage:
    with ledger_transaction(db):
        # validate everything, then write
"""
import threading
from contextlib import contextmanager

from sqlalchemy.orm import Session

from exam_platform.core import events

_ledger_lock = threading.RLock()

DEPTH_KEY = "ledger_depth"
ROLLBACK_ONLY_KEY = "ledger_rollback_only"


class RollbackOnlyError(RuntimeError):
    """An inner unit failed, so the enclosing unit cannot commit"""


@contextmanager
def ledger_transaction(db: Session):
    """
    Run one call as a whole: no interleaving with other calls, commit on success,
    rollback on any exception. Nested blocks join the outermost unit; once a
    nested block fails the outermost unit rolls back even if the error was caught.
    """
    with _ledger_lock:
        depth = db.info.get(DEPTH_KEY, 0)
        db.info[DEPTH_KEY] = depth + 1
        try:
            yield db
            if depth == 0:
                if db.info.get(ROLLBACK_ONLY_KEY):
                    raise RollbackOnlyError("A nested unit of work failed; nothing was committed")
                db.commit()
        except Exception:
            if depth == 0:
                db.rollback()
                events.take_pending(db)
            else:
                db.info[ROLLBACK_ONLY_KEY] = True
            raise
        finally:
            db.info[DEPTH_KEY] = depth
            if depth == 0:
                db.info.pop(ROLLBACK_ONLY_KEY, None)

    if depth == 0:
        events.dispatch(events.take_pending(db))
