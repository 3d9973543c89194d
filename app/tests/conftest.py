from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from playlist_janitor.db.models import Base
from playlist_janitor.db.session import make_engine
from playlist_janitor.main import app, get_database_service, get_db
from playlist_janitor.services.database_service import SqlDatabaseService

from fakes import InMemoryDatabaseService


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
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
def db_service(db):
    return SqlDatabaseService(db)


@pytest.fixture
def fake_service():
    return InMemoryDatabaseService()


@pytest.fixture
def client_for():
    """TestClient whose routes use the given database service."""
    def build(service):
        app.dependency_overrides[get_database_service] = lambda: service
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


@pytest.fixture
def sql_client(session_factory):
    """TestClient running against the in-memory SQLite database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def when():
    return datetime(2024, 1, 15, 12, 0, 0)
