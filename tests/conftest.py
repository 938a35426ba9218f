import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from app.database import Store
from app.schemas.user import User
from app.services.schedule_repository import ScheduleRepository


def local(*args):
    """Aware datetime in the process's local zone."""
    return datetime(*args).astimezone()


@pytest.fixture
def engine():
    # One shared in-memory connection so the attached schema survives between calls
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    yield engine
    engine.dispose()


@pytest.fixture
def log():
    return MagicMock()


@pytest.fixture
def store(engine, log):
    return Store(engine, logger=log)


@pytest.fixture
def repo(store):
    return ScheduleRepository(store, clock=lambda: local(2024, 1, 1, 9, 0, 0))


@pytest.fixture
def alice(repo):
    user = User(username="alice", name="Alice", email="alice@example.com",
                password_hash="x", cycle_length=timedelta(minutes=60), plate="ABC-1234")
    repo.add_user(user)
    return user
