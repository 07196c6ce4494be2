class RepositoryError(Exception):
    """Base class for failures reported by the repositories."""


class DuplicateEmailError(RepositoryError):
    """A user with this email already exists."""

    def __init__(self, email: str):
        super().__init__(f"Email already exists: {email}")
        self.email = email


class ReferencedUserMissingError(RepositoryError):
    """The user referenced by a new task does not exist."""

    def __init__(self, user_id: int):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class StorageError(RepositoryError):
    """Any storage failure that is not a known constraint violation."""
