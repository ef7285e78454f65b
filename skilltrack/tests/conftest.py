"""Shared fixtures for the SkillTrack test suite."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from skilltrack.auth_main import create_app as create_auth_app
from skilltrack.config import Settings
from skilltrack.container import build_auth_container, build_task_container
from skilltrack.database import create_db_and_tables, get_engine
from skilltrack.main import create_app as create_task_app
from skilltrack.repositories import (
    InMemorySkillRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    SqlSkillRepository,
    SqlTaskRepository,
    SqlUserRepository,
)
from skilltrack.services.session import PasswordHasher, TokenProvider
from skilltrack.services.task_domain import TaskDomainService
from skilltrack.services.token_store import TokenStore
from skilltrack.services.user_domain import UserDomainService


class FakePipeline:
    def __init__(self, redis):
        self._redis = redis
        self._commands = []

    def set(self, key, value, ex=None):
        self._commands.append((key, value, ex))
        return self

    def execute(self):
        results = [self._redis.set(key, value, ex=ex) for key, value, ex in self._commands]
        self._redis.executed_pipelines += 1
        self._commands = []
        return results


class FakeRedis:
    """Dict-backed stand-in for the subset of the Redis client the store uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.executed_pipelines = 0
        self.closed = False

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def ping(self):
        return True

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(
        repository_backend="memory",
        token_store_enabled=False,
        auth_secret="test-secret",
        access_token_ttl_seconds=900,
        refresh_token_ttl_seconds=3600,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def token_store(fake_redis, settings):
    return TokenStore(fake_redis, settings.access_token_ttl_seconds, settings.refresh_token_ttl_seconds)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def task_repo():
    return InMemoryTaskRepository()


@pytest.fixture
def skill_repo():
    return InMemorySkillRepository()


@pytest.fixture
def hasher():
    return PasswordHasher()


@pytest.fixture
def tokens(settings):
    return TokenProvider(
        settings.auth_secret,
        access_ttl_seconds=settings.access_token_ttl_seconds,
        refresh_ttl_seconds=settings.refresh_token_ttl_seconds,
    )


@pytest.fixture
def user_domain():
    return UserDomainService()


@pytest.fixture
def task_domain():
    return TaskDomainService()


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = get_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def future_due():
    return datetime.now() + timedelta(days=7)


@pytest.fixture
def task_client(task_repo, skill_repo, token_store, settings):
    container = build_task_container(task_repo, skill_repo, token_store)
    with TestClient(create_task_app(container, settings)) as client:
        yield client


@pytest.fixture
def auth_client(user_repo, token_store, settings):
    container = build_auth_container(settings, user_repo, token_store)
    with TestClient(create_auth_app(container, settings)) as client:
        yield client


@pytest.fixture
def sql_task_client(engine, token_store, settings):
    container = build_task_container(
        SqlTaskRepository(engine), SqlSkillRepository(engine), token_store, engine
    )
    with TestClient(create_task_app(container, settings)) as client:
        yield client


@pytest.fixture
def sql_auth_client(engine, token_store, settings):
    container = build_auth_container(settings, SqlUserRepository(engine), token_store, engine)
    with TestClient(create_auth_app(container, settings)) as client:
        yield client
