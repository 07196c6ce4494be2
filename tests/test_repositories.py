import pytest
from sqlalchemy import func, select

from taskhub import models
from taskhub.errors import DuplicateEmailError, ReferencedUserMissingError
from taskhub.repositories import TaskRepository, UserRepository


@pytest.fixture()
def users(db_session):
    return UserRepository(db_session)


@pytest.fixture()
def tasks(db_session):
    return TaskRepository(db_session)


def _count(db_session, model) -> int:
    return db_session.execute(select(func.count()).select_from(model)).scalar_one()


def test_create_user_assigns_stable_id(users):
    user = users.create_user("Jane Doe", "jane@example.com")
    assert user.id > 0

    again = users.get_user_by_id(user.id)
    assert again is not None
    assert (again.id, again.name, again.email) == (user.id, "Jane Doe", "jane@example.com")


def test_create_user_duplicate_email_raises(users, db_session):
    users.create_user("First", "same@example.com")

    with pytest.raises(DuplicateEmailError) as exc_info:
        users.create_user("Second", "same@example.com")
    assert exc_info.value.email == "same@example.com"

    # The session is usable again and nothing changed.
    assert [u.name for u in users.list_users()] == ["First"]


def test_get_user_by_id_returns_none_when_absent(users):
    assert users.get_user_by_id(12345) is None


def test_list_users_empty(users):
    assert users.list_users() == []


def test_delete_user_reports_whether_a_row_was_removed(users):
    user = users.create_user("Gone", "gone@example.com")

    assert users.delete_user(user.id) is True
    assert users.delete_user(user.id) is False
    assert users.get_user_by_id(user.id) is None


def test_delete_user_cascades_to_tasks(users, tasks, db_session):
    user = users.create_user("Owner", "owner@example.com")
    for title in ("a", "b", "c"):
        tasks.create_task(title=title, user_id=user.id)
    assert _count(db_session, models.Task) == 3

    assert users.delete_user(user.id) is True

    assert _count(db_session, models.Task) == 0
    assert tasks.get_tasks_by_user_id(user.id) == []


def test_create_task_for_missing_user_raises(tasks, db_session):
    with pytest.raises(ReferencedUserMissingError) as exc_info:
        tasks.create_task(title="Orphan", user_id=404)
    assert exc_info.value.user_id == 404

    assert _count(db_session, models.Task) == 0


def test_create_task_defaults(users, tasks):
    user = users.create_user("Alice", "alice@example.com")

    task = tasks.create_task(title="Buy milk", user_id=user.id)
    assert task.id > 0
    assert task.is_completed is False
    assert task.description is None

    assert tasks.get_task_by_id(task.id).title == "Buy milk"
    assert tasks.get_task_by_id(task.id + 100) is None


def test_tasks_by_user_id_ignores_other_users(users, tasks):
    alice = users.create_user("Alice", "alice@example.com")
    bob = users.create_user("Bob", "bob@example.com")
    mine = tasks.create_task(title="Mine", user_id=alice.id)
    tasks.create_task(title="Bob's", user_id=bob.id)

    assert [t.id for t in tasks.get_tasks_by_user_id(alice.id)] == [mine.id]
    assert tasks.get_tasks_by_user_id(999) == []


def test_update_task_status(users, tasks, db_session):
    user = users.create_user("Alice", "alice@example.com")
    task = tasks.create_task(title="Toggle", user_id=user.id)

    assert tasks.update_task_status(task.id, True) is True
    db_session.expire_all()
    assert tasks.get_task_by_id(task.id).is_completed is True

    assert tasks.update_task_status(task.id + 1, True) is False


def test_delete_task(users, tasks):
    user = users.create_user("Alice", "alice@example.com")
    keep = tasks.create_task(title="Keep", user_id=user.id)
    drop = tasks.create_task(title="Drop", user_id=user.id)

    assert tasks.delete_task(drop.id) is True
    assert tasks.delete_task(drop.id) is False
    assert [t.id for t in tasks.get_tasks_by_user_id(user.id)] == [keep.id]


def test_out_of_range_ids_short_circuit(users, tasks):
    huge = 2**40

    assert users.get_user_by_id(huge) is None
    assert users.delete_user(huge) is False
    assert tasks.get_task_by_id(huge) is None
    assert tasks.get_tasks_by_user_id(huge) == []
    assert tasks.update_task_status(huge, True) is False
    assert tasks.delete_task(huge) is False

    with pytest.raises(ReferencedUserMissingError):
        tasks.create_task(title="Nowhere", user_id=huge)
