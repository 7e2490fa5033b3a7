from __future__ import annotations

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from freelancy_api.core.base import Base
from freelancy_api.core.config import Settings
from freelancy_api.main import create_app
from freelancy_api.services.store import SqlResourceStore
from tests.helpers import FakeVerifier, auth_header

# Import models so they register with SQLAlchemy metadata.
from freelancy_api.models.accepted_task import AcceptedTaskRow  # noqa: F401
from freelancy_api.models.job import JobRow  # noqa: F401


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def store(db_engine):
    # The in-memory DB persists across tests with StaticPool; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine)
    return SqlResourceStore(session_factory)


@pytest.fixture()
def test_settings(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("JOB_DELETE_REQUIRES_OWNER", "true")
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "freelancy-test")
    monkeypatch.delenv("FIREBASE_SERVICE_KEY", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    return Settings()


@pytest.fixture()
def verifier():
    return FakeVerifier()


@pytest.fixture()
def app(test_settings, store, verifier):
    return create_app(settings=test_settings, store=store, verifier=verifier)


@pytest.fixture()
def client(app):
    """Anonymous client; pass ``headers=auth_header(...)`` per request."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary email.

    Usage:
        with client_for("a@x.com") as c:
            ...
    """

    @contextmanager
    def _client_for(email: str):
        with TestClient(app, headers=auth_header(email)) as c:
            yield c

    return _client_for
