"""
Pytest fixtures for testing
"""
import time
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mysubs.config import Settings
from mysubs.domain.errors import RepositoryTimeoutError
from mysubs.infrastructure.db.models import SubscriptionModel  # noqa: F401
from mysubs.infrastructure.db.session import Base
from mysubs.infrastructure.repositories.memory import InMemorySubscriptionRepository
from mysubs.infrastructure.repositories.postgres import SqlSubscriptionRepository
from mysubs.main import create_app


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by all sessions (and worker threads)"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_repo(db_engine):
    return SqlSubscriptionRepository(db_engine)


@pytest.fixture
def memory_repo():
    return InMemorySubscriptionRepository()


@pytest.fixture
def settings():
    return Settings(_env_file=None, STORAGE_BACKEND="memory", REQUEST_TIMEOUT_SECONDS=5.0)


@pytest.fixture
def client(settings, memory_repo):
    """Test client для FastAPI поверх in-memory репозитория"""
    return TestClient(create_app(settings=settings, repository=memory_repo))


@pytest.fixture
def make_client(settings):
    """Build a client around any repository (fakes included)"""
    def _make(repo, timeout: float | None = None):
        s = settings
        if timeout is not None:
            s = settings.model_copy(update={"REQUEST_TIMEOUT_SECONDS": timeout})
        return TestClient(create_app(settings=s, repository=repo))
    return _make


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


# === Repository fakes for failure simulation ===

class SpyRepository(InMemorySubscriptionRepository):
    """Records every repository call"""

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []

    def add(self, sub, timeout=None):
        self.calls.append("add")
        return super().add(sub, timeout=timeout)

    def update(self, sub, timeout=None):
        self.calls.append("update")
        return super().update(sub, timeout=timeout)

    def delete(self, subscription_id, timeout=None):
        self.calls.append("delete")
        return super().delete(subscription_id, timeout=timeout)

    def get(self, subscription_id, timeout=None):
        self.calls.append("get")
        return super().get(subscription_id, timeout=timeout)

    def list_all(self, timeout=None):
        self.calls.append("list_all")
        return super().list_all(timeout=timeout)

    def total_cost(self, service_name, user_id, start, end, timeout=None):
        self.calls.append("total_cost")
        return super().total_cost(service_name, user_id, start, end, timeout=timeout)


class _RaisingRepository:
    """Every call raises the exception built by make_error()"""

    def make_error(self) -> Exception:
        raise NotImplementedError

    def ping(self, timeout=None):
        raise self.make_error()

    def close(self):
        pass

    def add(self, sub, timeout=None):
        raise self.make_error()

    def update(self, sub, timeout=None):
        raise self.make_error()

    def delete(self, subscription_id, timeout=None):
        raise self.make_error()

    def get(self, subscription_id, timeout=None):
        raise self.make_error()

    def list_all(self, timeout=None):
        raise self.make_error()

    def total_cost(self, service_name, user_id, start, end, timeout=None):
        raise self.make_error()


class TimeoutRepository(_RaisingRepository):
    """Backend cancelled the statement"""

    def make_error(self):
        return RepositoryTimeoutError("canceling statement due to statement timeout")


class FailingRepository(_RaisingRepository):
    """Backend failure with details that must not reach the client"""

    def make_error(self):
        return RuntimeError("boom: connection to 10.0.0.5 password=secret refused")


class SlowRepository(InMemorySubscriptionRepository):
    """Sleeps before every call, longer than the configured deadline"""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    def ping(self, timeout=None):
        time.sleep(self.delay)

    def add(self, sub, timeout=None):
        time.sleep(self.delay)
        return super().add(sub, timeout=timeout)

    def get(self, subscription_id, timeout=None):
        time.sleep(self.delay)
        return super().get(subscription_id, timeout=timeout)

    def list_all(self, timeout=None):
        time.sleep(self.delay)
        return super().list_all(timeout=timeout)


@pytest.fixture
def spy_repo():
    return SpyRepository()


@pytest.fixture
def timeout_repo():
    return TimeoutRepository()


@pytest.fixture
def failing_repo():
    return FailingRepository()


@pytest.fixture
def slow_repo():
    return SlowRepository(delay=0.5)
