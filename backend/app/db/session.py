"""Engine and session factory for the content database"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.models.base import Base

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Email dispatch workers open their own sessions from other threads
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
    pool_recycle=3600
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Request-scoped session, closed when the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create any missing tables; there are no migrations"""
    import app.models  # noqa: F401 - registers every table on Base.metadata
    Base.metadata.create_all(bind=engine)
