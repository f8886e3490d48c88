from clubportal.db.base import Base
from clubportal.db.session import SessionLocal, engine, get_db, init_db, make_engine
from clubportal.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "init_db", "make_engine", "ALL_TABLE_NAMES"]
