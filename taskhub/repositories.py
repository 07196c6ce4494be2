"""Data access for users and tasks.

Each repository wraps one SQLAlchemy ``Session`` and turns storage failures
into the errors defined in :mod:`taskhub.errors`. Nothing here knows about
HTTP.
"""

from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .database import ConstraintViolation, classify_integrity_error
from .errors import DuplicateEmailError, ReferencedUserMissingError, StorageError

# Ids are stored in 32-bit INTEGER columns; anything outside cannot exist.
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1


def _storable_id(value: int) -> bool:
    return ID_MIN <= value <= ID_MAX


class _Repository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Database commit failed") from exc

    def _run(self, stmt):
        try:
            return self.db.execute(stmt)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Database query failed") from exc


class UserRepository(_Repository):
    def create_user(self, name: str, email: str) -> models.User:
        """Insert a user and return it with its generated id.

        Raises:
            DuplicateEmailError: if the email is already taken.
            StorageError: on any other database failure.
        """
        user = models.User(name=name, email=email)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if classify_integrity_error(exc) is ConstraintViolation.UNIQUE:
                raise DuplicateEmailError(email) from exc
            raise StorageError("Database commit failed") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Database commit failed") from exc

        self.db.refresh(user)
        return user

    def get_user_by_id(self, user_id: int) -> Optional[models.User]:
        if not _storable_id(user_id):
            return None
        stmt = select(models.User).where(models.User.id == user_id)
        return self._run(stmt).scalar_one_or_none()

    def list_users(self) -> List[models.User]:
        stmt = select(models.User).order_by(models.User.id)
        return list(self._run(stmt).scalars().all())

    def delete_user(self, user_id: int) -> bool:
        """Delete a user; the database drops the user's tasks in the same statement.

        Returns:
            True if a user was deleted, False if it did not exist.
        """
        if not _storable_id(user_id):
            return False
        result = self._run(delete(models.User).where(models.User.id == user_id))
        self._commit()
        return result.rowcount > 0


class TaskRepository(_Repository):
    def create_task(
        self,
        title: str,
        user_id: int,
        description: Optional[str] = None,
    ) -> models.Task:
        """Insert a not-yet-completed task for ``user_id``.

        Raises:
            ReferencedUserMissingError: if no user has that id.
            StorageError: on any other database failure.
        """
        if not _storable_id(user_id):
            raise ReferencedUserMissingError(user_id)

        task = models.Task(
            title=title,
            description=description,
            is_completed=False,
            user_id=user_id,
        )
        self.db.add(task)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if classify_integrity_error(exc) is ConstraintViolation.FOREIGN_KEY:
                raise ReferencedUserMissingError(user_id) from exc
            raise StorageError("Database commit failed") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Database commit failed") from exc

        self.db.refresh(task)
        return task

    def get_tasks_by_user_id(self, user_id: int) -> List[models.Task]:
        # No check that the user exists: an unknown id just has no tasks.
        if not _storable_id(user_id):
            return []
        stmt = select(models.Task).where(models.Task.user_id == user_id).order_by(models.Task.id)
        return list(self._run(stmt).scalars().all())

    def get_task_by_id(self, task_id: int) -> Optional[models.Task]:
        if not _storable_id(task_id):
            return None
        stmt = select(models.Task).where(models.Task.id == task_id)
        return self._run(stmt).scalar_one_or_none()

    def update_task_status(self, task_id: int, is_completed: bool) -> bool:
        if not _storable_id(task_id):
            return False
        stmt = (
            update(models.Task)
            .where(models.Task.id == task_id)
            .values(is_completed=is_completed)
        )
        result = self._run(stmt)
        self._commit()
        return result.rowcount > 0

    def delete_task(self, task_id: int) -> bool:
        if not _storable_id(task_id):
            return False
        result = self._run(delete(models.Task).where(models.Task.id == task_id))
        self._commit()
        return result.rowcount > 0
