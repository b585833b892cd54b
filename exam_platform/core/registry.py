"""
Role registry: caller identity -> profile (name, role)
"""
import logging

from sqlalchemy.orm import Session

from exam_platform.core.db_models import User, ROLES
from exam_platform.core.errors import NotFoundError, StateConflictError, ValidationError
from exam_platform.core.ledger import ledger_transaction

logger = logging.getLogger(__name__)


def is_registered(db: Session, identity: str) -> bool:
    return bool(identity) and db.get(User, identity) is not None


def role_of(db: Session, identity: str) -> str:
    return get_profile(db, identity).role


def get_profile(db: Session, identity: str) -> User:
    user = db.get(User, identity) if identity else None
    if user is None:
        raise NotFoundError("User not registered")
    return user


def register(db: Session, identity: str, name: str, role: str) -> User:
    """Create the one and only profile of `identity`"""
    if not identity:
        raise ValidationError("Identity cannot be empty")
    if not name or not name.strip():
        raise ValidationError("Name cannot be empty")
    role = (role or "").lower()
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    with ledger_transaction(db):
        if db.get(User, identity) is not None:
            raise StateConflictError("User already registered")
        user = User(identity=identity, name=name, role=role)
        db.add(user)
        db.flush()

    logger.info("Registered %s as %s", identity, role)
    return user
