import json
import logging
from contextlib import contextmanager

from sqlmodel import Session, SQLModel, create_engine, select
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL, LEGACY_DATA_FILE

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task
from .store import import_all

logger = logging.getLogger(__name__)


def make_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # Every connection must see the same in-memory database.
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)

    return create_engine(url, echo=False, pool_pre_ping=True)


engine = make_engine()


def get_db():
    """Dependency to get database session."""
    with Session(engine) as db:
        yield db


@contextmanager
def get_session():
    """Get a database session (context manager style).

    This is a convenience function for use outside of FastAPI dependencies.
    Usage:
        with get_session() as session:
            # do something with session
    """
    with Session(engine) as session:
        yield session


def create_tables(bind=None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)


def import_legacy_file(session: Session, path=LEGACY_DATA_FILE) -> int:
    """Seed an empty store from a flat JSON data file.

    Returns the number of tasks imported. Nothing happens when no file is
    configured, the file is missing, or the store already holds tasks.
    """
    if path is None or not path.exists():
        return 0
    if session.exec(select(Task.pk).limit(1)).first() is not None:
        logger.info("Store not empty, skipping legacy import from %s", path)
        return 0

    data = json.loads(path.read_text(encoding="utf-8"))
    count = import_all(session, data)
    logger.info("Imported %d tasks from legacy file %s", count, path)
    return count
