import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import schemas
from .config import Settings, settings as default_settings
from .database import Database
from .errors import StorageError
from .routers import tasks as tasks_routes
from .routers import users as users_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    # Tables must exist before the first request is served.
    database.ensure_schema()
    try:
        yield
    finally:
        database.dispose()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"detail": jsonable_encoder(exc.errors())},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def storage_exception_handler(request: Request, exc: StorageError):
    logger.exception(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        {"detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled application error", exc_info=exc)
    return JSONResponse(
        {"detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """Build the application.

    ``database`` lets callers (tests, scripts) inject their own storage
    handle; otherwise one is built from ``settings``. The engine does not
    connect until the lifespan creates the schema.
    """
    settings = settings or default_settings
    if database is None:
        database = Database(settings.sqlalchemy_url, echo=settings.sql_echo)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(users_routes.router)
    app.include_router(tasks_routes.router)

    @app.get("/health", response_model=schemas.HealthResponse)
    def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc)}

    return app
