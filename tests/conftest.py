import pytest
from fastapi.testclient import TestClient

from taskhub.config import Settings
from taskhub.database import Database
from taskhub.main import create_app
from taskhub.models import Task, User

# In-memory SQLite shared across connections via StaticPool, foreign keys on.
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture()
def settings():
    return Settings(database_url=TEST_DATABASE_URL)


@pytest.fixture()
def database(settings):
    """A fresh, empty database for each test function."""
    db = Database(settings.sqlalchemy_url)
    db.ensure_schema()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture()
def db_session(database):
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(settings, database):
    """TestClient wired to the in-memory database; runs startup/shutdown hooks."""
    app = create_app(settings, database=database)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def user_factory(db_session):
    """Create users directly in the test database, bypassing the API."""

    def _create_user(name: str, email: str) -> User:
        user = User(name=name, email=email)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture()
def task_factory(db_session):
    def _create_task(user_id: int, title: str, description=None, is_completed=False) -> Task:
        task = Task(
            title=title,
            description=description,
            is_completed=is_completed,
            user_id=user_id,
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _create_task
