import os
from typing import Generator, Callable
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
import sqlalchemy.exc as sa_exc

from resourcelibrary_backend.settings import settings

POSTGRES_HOST = os.environ.get("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.environ.get("POSTGRES_PORT", "5432")
POSTGRES_USER = os.environ.get("POSTGRES_USER")
POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD")
POSTGRES_DB = os.environ.get("POSTGRES_DB")

DATABASE_URL = settings.DATABASE_URL or (
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}"
)

if DATABASE_URL.startswith("sqlite"):
    _engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, future=True)
else:
    _engine = create_engine(
        DATABASE_URL,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,     # 30 min - protects against idle disconnects
        pool_pre_ping=True,    # avoids stale connections
        pool_use_lifo=True,
        future=True
    )

SessionLocal: Callable[[], Session] = sessionmaker(
    bind=_engine,
    autocommit=False,
    expire_on_commit=False,
    autoflush=False,
    class_=Session
)


def get_engine():
    return _engine


def _get_db() -> Generator[Session, None, None]:
    """
    Internal database session generator with transaction management.

    Commits on success, rolls back on any exception and always closes
    the session.
    """
    db = SessionLocal()
    try:
        yield db

        if db.in_transaction():
            db.commit()
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: provides a database session.

    Usage:
        @router.get("/resourcelibrary")
        def page(db: Session = Depends(get_db)):
            ...
    """
    try:
        yield from _get_db()
    except sa_exc.TimeoutError as e:  # QueuePool acquisition timed out
        from resourcelibrary_backend.exceptions import ServiceUnavailableException
        raise ServiceUnavailableException(
            detail="Database is busy. Please retry shortly.",
            headers={"Retry-After": "2"}
        ) from e
