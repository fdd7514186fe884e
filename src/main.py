"""
FastAPI application factory.

Run with e.g. `uvicorn --factory src.main:create_app`. Nothing is built at import time.
Storage backend, database URL and log level come from Settings (environment).
"""

from typing import Iterator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from src.api.routes import (
    game_error_handler,
    get_service,
    request_validation_handler,
    router,
)
from src.core.config import Settings
from src.core.exceptions import GameError
from src.core.logging_config import configure_logging
from src.db.database import build_session_factory, session_scope
from src.db.locks import KeyedLocks
from src.db.memory_repository import InMemoryGameRepository
from src.db.sql_repository import SQLGameRepository
from src.services.diamond_service import DiamondService


def create_app(
    settings: Optional[Settings] = None, service: Optional[DiamondService] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: configuration (read from the environment if not provided)
        service: use this DiamondService for every request instead of building one from the settings
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Diamond Hunt API")
    app.include_router(router)
    app.add_exception_handler(GameError, game_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    if service is not None:
        app.dependency_overrides[get_service] = lambda: service
    elif settings.storage == "memory":
        memory_service = DiamondService(InMemoryGameRepository())
        app.dependency_overrides[get_service] = lambda: memory_service
    else:
        session_factory = build_session_factory(settings.database_url, echo=settings.sql_echo)
        # one registry for the whole process: every request gets its own session/repository
        locks = KeyedLocks()

        def sql_service() -> Iterator[DiamondService]:
            with session_scope(session_factory) as db:
                yield DiamondService(SQLGameRepository(db, locks=locks))

        app.dependency_overrides[get_service] = sql_service

    return app
