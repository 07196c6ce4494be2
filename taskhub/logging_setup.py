import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger for the service process.

    Call this once, before the app starts serving. Uvicorn's own loggers keep
    their handlers; SQLAlchemy engine logging stays at WARNING unless
    ``SQL_ECHO`` is enabled.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers when called twice (e.g. with --reload).
    for handler in list(root.handlers):
        if getattr(handler, "_taskhub", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._taskhub = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
