"""
Shared fixtures.

Every test gets its own in-memory SQLite database bound to the application
`sessionMaker`, so endpoints and stores see the same data. Events are never
shipped to OpenObserve; the shipper is replaced by a mock.
"""

import pytest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from distribution.src.db import ORMbase, sessionMaker


@pytest.fixture(autouse=True)
def openobserve_events():
    with patch("distribution.src.openobserve.logEvent") as logEvent:
        yield logEvent


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database, schema pre-created, per test.

    StaticPool is required so that create_all and every session use
    the same single connection, otherwise each pool checkout gets a new
    in-memory DB that has no tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ORMbase.metadata.create_all(engine)
    sessionMaker.configure(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionMaker()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    from distribution.main import app

    with TestClient(app) as c:
        yield c
