"""
HTTP routes of the game API.

Every response body is either {"result": ...} or {"error": "..."}.
The service is resolved per request through the `get_service` dependency, which the app factory overrides.
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GetGameRequest,
    JoinGameRequest,
    PlayerBody,
    RevealBody,
    RevealRequest,
)
from src.core.exceptions import (
    GameError,
    GameStateError,
    NotFoundError,
    NotYourTurnError,
    PlayerNotInGameError,
    ValidationError,
)
from src.services.diamond_service import DiamondService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])

# Most specific first: the first matching entry wins.
ERROR_STATUS_CODES: list[tuple[type[GameError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PlayerNotInGameError, status.HTTP_403_FORBIDDEN),
    (NotYourTurnError, status.HTTP_409_CONFLICT),
    (GameStateError, status.HTTP_409_CONFLICT),
]


def get_service() -> DiamondService:
    """Placeholder dependency. create_app() replaces it with the configured storage backend."""
    raise RuntimeError("No DiamondService configured. Build the app with src.main.create_app().")


def status_code_for(exc: GameError) -> int:
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def ok(result: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"result": jsonable_encoder(result)})


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    code = status_code_for(exc)
    logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, code, exc)
    return JSONResponse(status_code=code, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (missing keys, non-integer numbers, ...) use the same error envelope."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning("%s %s malformed: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=422, content={"error": message})


# --- ROUTES ---
@router.post("", status_code=status.HTTP_201_CREATED)
def create_game(
    body: CreateGameRequest, service: DiamondService = Depends(get_service)
) -> JSONResponse:
    created = service.create_new_game(body)
    return ok(created.game_id, status.HTTP_201_CREATED)


@router.get("/{game_id}")
def get_game(game_id: UUID, service: DiamondService = Depends(get_service)) -> JSONResponse:
    return ok(service.get_game_state(GetGameRequest(game_id=game_id)))


@router.post("/{game_id}/join")
def join_game(
    game_id: UUID, body: PlayerBody, service: DiamondService = Depends(get_service)
) -> JSONResponse:
    request = JoinGameRequest(game_id=game_id, player_id=body.player_id)
    return ok(service.join_game(request))


@router.post("/{game_id}/turn")
def make_turn(
    game_id: UUID, body: RevealBody, service: DiamondService = Depends(get_service)
) -> JSONResponse:
    request = RevealRequest(game_id=game_id, player_id=body.player_id, x=body.x, y=body.y)
    return ok(service.reveal_cell(request))


@router.delete("/{game_id}")
def delete_game(game_id: UUID, service: DiamondService = Depends(get_service)) -> JSONResponse:
    service.delete_game(DeleteGameRequest(game_id=game_id))
    return ok(game_id)
