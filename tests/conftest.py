"""Shared fixtures: a file-backed SQLite database per test, settings and a web client."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from clubportal.config import Settings
from clubportal.db.session import get_db, init_db, make_engine
from clubportal.main import create_app
from clubportal.services.user_service import create_user


@pytest.fixture
def engine(tmp_path):
    # A file, not :memory:, so sessions on other threads see the same database
    engine = make_engine(f"sqlite:///{tmp_path / 'clubportal.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'clubportal.db'}",
        auto_create_schema=False,
        seed_example_club=False,
        secret_key="test-secret",
        output_dir=str(tmp_path / "public"),
        build_debounce=timedelta(seconds=10),
    )


@pytest.fixture
def app(settings, session_factory):
    app = create_app(settings)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def owner(db):
    return create_user(db, "owner@example.com", "secret-password")
