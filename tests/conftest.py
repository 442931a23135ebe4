"""
Shared test fixtures.

These replace real infrastructure with lightweight in-memory alternatives:
- PostgreSQL → SQLite in memory (one shared connection via StaticPool, so
  the API thread pool and the test see the same database)
- Redis → fakeredis (pure Python Redis mock)
- HTTP server → httpx.AsyncClient with ASGI transport (no network)

The lifespan is not run in tests. The client fixture builds the components
with init_components() and no worker thread is started: tests drive the
worker side explicitly through job_queue / CompressionWorker.run_once().
"""

import fakeredis
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.main import create_app, init_components
import jobs.registry
from control.state_machine import ProcessingStateMachine
from jobqueue.archive import ArchiveStore
from jobqueue.job import DispatchRequest
from jobqueue.queue import JobQueue
from models.base import Base
from settings_store.store import SettingsStore

TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture
def db_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
def fake_redis():
    """Create a fake Redis instance (in-memory, no real Redis needed)."""
    r = fakeredis.FakeRedis()
    yield r
    r.flushall()


@pytest.fixture(autouse=True)
def handler_registry(monkeypatch):
    """
    Each test gets its own copy of the MIME type registry, so fake handlers
    registered by one test are gone when it ends.
    """
    registry = dict(jobs.registry._REGISTRY)
    monkeypatch.setattr(jobs.registry, "_REGISTRY", registry)
    return registry


@pytest.fixture
def settings_store(fake_redis):
    store = SettingsStore(fake_redis)
    store.load()
    return store


@pytest.fixture
def state_machine():
    return ProcessingStateMachine()


@pytest.fixture
def archive(fake_redis):
    return ArchiveStore(fake_redis)


class RecordingNotifier:
    """Collects finished jobs instead of sending mail."""

    def __init__(self):
        self.finished = []

    def job_finished(self, job):
        self.finished.append(job)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def job_queue(settings_store, state_machine, archive, session_factory, notifier):
    """A queue in STARTUP state. Call state_machine.start() to let the worker pull."""
    return JobQueue(settings_store, state_machine, archive, session_factory, notifier)


@pytest.fixture
def make_request():
    """Factory for valid dispatch requests; keyword arguments override single fields."""

    def _make(**overrides) -> DispatchRequest:
        values = {
            "base_path": "/objects/4711",
            "object_uid": "obj-4711",
            "media_uid": "media-0001",
            "mime_type": "image/jpeg",
            "title": "statue.jpg",
            "levels": [1000, "Automatic"],
        }
        values.update(overrides)
        return DispatchRequest(**values)

    return _make


@pytest.fixture
def app(fake_redis, session_factory):
    app = create_app(use_lifespan=False)
    init_components(app, fake_redis, session_factory)
    return app


@pytest_asyncio.fixture
async def client(app):
    """
    Create a test HTTP client that talks directly to the FastAPI app.

    ASGITransport means requests go directly to the app in-process,
    no HTTP server or network involved. Requests come from 127.0.0.1.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
