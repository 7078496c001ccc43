import os

os.environ.setdefault("PLAYGROUND_DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from playground.db import Base
from playground.main import app, get_session_factory, get_transport
from playground.store import SqlRequestStore


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    db = session_factory()
    try:
        yield SqlRequestStore(db)
    finally:
        db.close()


class FakeServer:
    """Stands in for the remote host behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(200, json={"ok": True})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(session_factory, server):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_transport] = lambda: server.transport
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
