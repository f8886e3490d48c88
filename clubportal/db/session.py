"""
Database session and engine.
"""
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from clubportal.config import settings
from clubportal.db.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: str) -> Engine:
    """Engine for PostgreSQL (pooled) or SQLite (file shared by web and worker processes)."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # timeout: wait on the other process's write lock instead of failing with "database is locked"
        sqlite_engine = create_engine(database_url, connect_args={"check_same_thread": False, "timeout": 30})
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(
        database_url,
        pool_size=8,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
    )


def init_db(bind: Engine) -> None:
    """Create missing tables (and the SQLite data directory). Alembic stays the migration path."""
    import clubportal.models  # noqa: F401  registers every model on Base.metadata

    url = bind.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind)


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
