"""
Database connection and session management using SQLAlchemy
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
import logging
import os

from exam_platform.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


def make_engine(url: str):
    """Create an engine, applying the SQLite tuning used for the app database"""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    in_memory = parsed.database in (None, "", ":memory:")
    kwargs = {
        "connect_args": {
            "check_same_thread": False,  # Sessions are used from the threadpool
            "timeout": 30.0  # Wait up to 30 seconds for locks to be released
        },
    }
    if in_memory:
        # One shared connection, otherwise every session gets its own empty database
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    sqlite_engine = create_engine(url, **kwargs)

    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=30000")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = make_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def init_db():
    """Initialize database by creating all tables"""
    # Import all models to ensure they're registered
    from exam_platform.core import db_models  # noqa: F401

    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database not in (None, "", ":memory:"):
        os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized at: %s", engine.url.render_as_string(hide_password=True))


def get_db() -> Session:
    """
    Dependency function for FastAPI to get database session
    Usage: db: Session = Depends(get_db)
    Note: mutations commit through ledger_transaction, never in the route handler
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always close the session to release database locks
        db.close()


@contextmanager
def get_db_session():
    """
    Context manager for database sessions
    Usage:
        with get_db_session() as db:
            # use db session
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
