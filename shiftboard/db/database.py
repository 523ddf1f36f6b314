import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from shiftboard.core.config import settings
from shiftboard.core.errors import ConflictError, StorageError

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}  # Required for SQLite with FastAPI

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def commit_or_raise(db: Session) -> None:
    """
    Commit, translating database failures into domain errors.
    IntegrityError is left to the caller, which knows which constraint it raced on.
    """
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError("stale_write") from None
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database commit failed: {e}")
        raise StorageError() from e
