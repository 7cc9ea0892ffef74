"""Shared fixtures: a throwaway SQLite database and seeded chat participants."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

TEST_DB_PATH = Path(tempfile.gettempdir()) / "jiffyjobs-test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient


@pytest.fixture()
def database():
    """Recreate every table so each test starts from an empty database."""

    from jiffyjobs.infrastructure import database as database_module
    from jiffyjobs.infrastructure import models  # noqa: F401

    database_module.Base.metadata.drop_all(bind=database_module.engine, checkfirst=True)
    database_module.Base.metadata.create_all(bind=database_module.engine)
    yield database_module
    database_module.engine.dispose()


@pytest.fixture()
def db_session(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app(database):
    from jiffyjobs.main import create_app

    return create_app()


@pytest.fixture()
def client(app):
    """Return a test client bound to a clean application instance."""

    with TestClient(app) as test_client:
        yield test_client


@dataclass
class ChatParticipants:
    poster: object
    helper: object
    outsider: object
    task: object

    @staticmethod
    def token(user) -> str:
        from jiffyjobs.infrastructure.security import create_user_token

        return create_user_token(user.id, user.email)

    def headers(self, user) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token(user)}"}


@pytest.fixture()
def participants(db_session) -> ChatParticipants:
    """A poster, a helper with a pending bid on the poster's task and an unrelated user."""

    from jiffyjobs.domain.entities import Bid, Task, User
    from jiffyjobs.infrastructure.repositories import TaskRepository, UserRepository

    users = UserRepository(db_session)
    poster = users.create(User(id=None, name="Paula Poster", email="poster@example.com"))
    helper = users.create(User(id=None, name="Hugo Helper", email="helper@example.com"))
    outsider = users.create(User(id=None, name="Olga Outsider", email="outsider@example.com"))

    tasks = TaskRepository(db_session)
    task = tasks.create_task(
        Task(id=None, title="Assemble a bookshelf", status="OPEN", poster_id=poster.id)
    )
    tasks.create_bid(
        Bid(id=None, task_id=task.id, helper_id=helper.id, amount=Decimal("35.00"))
    )
    return ChatParticipants(poster=poster, helper=helper, outsider=outsider, task=task)


@pytest.fixture()
def thread_id(client: TestClient, participants: ChatParticipants) -> int:
    response = client.post(
        "/chat/threads",
        json={"task_id": participants.task.id, "helper_id": participants.helper.id},
        headers=participants.headers(participants.poster),
    )
    assert response.status_code == 200
    return response.json()["thread"]["id"]
