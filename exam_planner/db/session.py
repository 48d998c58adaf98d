"""Database session and engine management."""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from loguru import logger

from exam_planner.config import settings
from exam_planner.utils.exceptions import PersistenceError

engine = create_engine(
    str(settings.DATABASE_URL),
    pool_pre_ping=True,
    pool_recycle=3600,  # Recycle connections after 1 hour
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Keep objects usable after commit
)


@contextmanager
def write_transaction(db: Session, action: str) -> Iterator[Session]:
    """Run a unit of work: commit on success, roll everything back otherwise."""
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to persist {action}: {exc}")
        db.rollback()
        raise PersistenceError(f"Could not persist {action}.") from exc
    except Exception:
        db.rollback()
        raise
