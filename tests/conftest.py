"""Pytest fixtures for the task tracker tests."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from tasktracker.client.api import TaskAPI
from tasktracker.client.store import TaskStore
from tasktracker.database import create_tables, get_db, make_engine
from tasktracker.main import app


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = make_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine) -> TestClient:
    """Create a test client for the API backed by the in-memory database."""
    def override_get_db():
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api(client) -> TaskAPI:
    return TaskAPI(http=client)


@pytest.fixture
def task_store(api) -> TaskStore:
    ticks = iter(range(1_700_000_000, 1_800_000_000))
    return TaskStore(api, clock=lambda: float(next(ticks)))


def make_task(task_id: int, text: str = "Task", **fields) -> dict:
    task = {
        "id": task_id,
        "text": text,
        "completed": False,
        "priority": "medium",
        "dueDate": "",
        "tags": [],
    }
    task.update(fields)
    return task
