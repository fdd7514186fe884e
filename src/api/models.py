"""Requests and Response models

Field aliases follow the camelCase names of the public API (fieldWidth, playerId, ...).
Python code may use either the alias or the field name.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from src.core.shared_types import Status

PlayerId = str


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- REQUEST MODELS ---
class CreateGameRequest(_RequestModel):
    """Bounds and parity are checked by the domain layer, so a bad value is reported like any other game error."""

    field_width: StrictInt = Field(alias="fieldWidth")
    field_height: StrictInt = Field(alias="fieldHeight")
    diamonds_quantity: StrictInt = Field(alias="diamondsQuantity")


class PlayerBody(_RequestModel):
    player_id: PlayerId = Field(alias="playerId")


class RevealBody(PlayerBody):
    x: StrictInt
    y: StrictInt


class GetGameRequest(_RequestModel):
    game_id: UUID


class DeleteGameRequest(_RequestModel):
    game_id: UUID


class JoinGameRequest(PlayerBody):
    game_id: UUID


class RevealRequest(RevealBody):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameCreatedResponse(BaseModel):
    game_id: UUID


class GameStateResponse(BaseModel):
    """
    Public view of a game.

    * field: None for hidden cells, 0-8 for revealed hints, 9 for a revealed diamond
    * players: turn order, the first player has the turn
    * count: diamonds found per player, plus the "total"
    * winner: None while playing, and also when the game ends in a tie
    """

    field: list[list[Optional[int]]]
    players: list[PlayerId]
    count: dict[str, int]
    winner: Optional[PlayerId]
    status: Status
