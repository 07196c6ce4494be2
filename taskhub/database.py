import enum
import logging
from typing import Any, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class ConstraintViolation(enum.Enum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    OTHER = "other"


# PostgreSQL SQLSTATE class 23 codes.
_SQLSTATE_VIOLATIONS = {
    "23505": ConstraintViolation.UNIQUE,
    "23503": ConstraintViolation.FOREIGN_KEY,
}


def classify_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """Map a driver-level integrity error onto a backend-neutral kind.

    PostgreSQL drivers expose the SQLSTATE (``sqlstate`` on psycopg 3,
    ``pgcode`` on psycopg2). SQLite only reports a message, so fall back
    to matching the constraint type named in it.
    """
    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in _SQLSTATE_VIOLATIONS:
        return _SQLSTATE_VIOLATIONS[code]

    message = str(orig).upper()
    if "UNIQUE CONSTRAINT" in message:
        return ConstraintViolation.UNIQUE
    if "FOREIGN KEY CONSTRAINT" in message:
        return ConstraintViolation.FOREIGN_KEY
    return ConstraintViolation.OTHER


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create the engine (and its connection pool) for ``url``.

    SQLite gets foreign keys switched on for every connection so that
    ``ON DELETE CASCADE`` and referential checks behave as on PostgreSQL.
    In-memory SQLite shares a single connection via ``StaticPool``.
    """
    parsed = make_url(url)
    kwargs: dict[str, Any] = {"echo": echo}

    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)

    if parsed.get_backend_name() == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


class Database:
    """Storage handle: one engine (and its pool) plus a session factory."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_db_engine(url, echo=echo)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False)

    def ensure_schema(self) -> None:
        """Create the tables if they do not exist yet. Safe to call repeatedly."""
        from . import models  # noqa: F401  (registers tables on Base.metadata)

        Base.metadata.create_all(bind=self.engine)
        logger.info(
            "Database schema ready on %s",
            make_url(self.url).render_as_string(hide_password=True),
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool closed")


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session bound to the app's database and always close it.

    Repositories are responsible for commit / rollback.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
