"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameCreatedResponse,
    GameStateResponse,
    GetGameRequest,
    JoinGameRequest,
    RevealRequest,
)
from src.core.exceptions import NotFoundError
from src.core.models import GameModel
from src.core.shared_types import DIAMOND
from src.db.repository import GameRepository
from src.diamonds.game import Game

logger = logging.getLogger(__name__)


class DiamondService:
    """Orchestration of layers for the diamond hunt."""

    def __init__(
        self, repository: GameRepository, rng: Optional[random.Random] = None
    ) -> None:
        self.repo = repository
        # Only consumed when seeding new fields. Inject a seeded Random for reproducible games.
        self.rng = rng or random.Random()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameCreatedResponse:
        """Validate the parameters, seed a field and persist the new game."""

        new_game = Game.new_game(
            field_width=request.field_width,
            field_height=request.field_height,
            diamonds_quantity=request.diamonds_quantity,
            rng=self.rng,
        )
        _, game_id = self.repo.create_game(new_game.to_model())

        logger.info(
            "Created game %s (%dx%d, %d diamonds)",
            game_id,
            request.field_width,
            request.field_height,
            request.diamonds_quantity,
        )
        return GameCreatedResponse(game_id=game_id)

    def join_game(self, request: JoinGameRequest) -> GameStateResponse:
        """A player asks for a seat in the game."""

        with self.repo.lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            game.register_player(request.player_id)
            self.repo.update_game(request.game_id, game.to_model())

        logger.info("Player %s joined game %s", request.player_id, request.game_id)
        return self._create_state_response(game)

    def get_game_state(self, request: GetGameRequest) -> GameStateResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_state_response(game)

    def reveal_cell(self, request: RevealRequest) -> GameStateResponse:
        """Make a reveal attempt. The Game raises if the move is not allowed, in which case nothing gets stored."""

        with self.repo.lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            revealed = game.reveal(request.player_id, request.x, request.y)
            self.repo.update_game(request.game_id, game.to_model())

        logger.debug(
            "Player %s revealed (%d, %d) in game %s: %s",
            request.player_id,
            request.x,
            request.y,
            request.game_id,
            "diamond" if revealed == DIAMOND else revealed,
        )
        if game.is_finished:
            logger.info(
                "Game %s finished. Winner: %s", request.game_id, game.winner or "none (tie)"
            )
        return self._create_state_response(game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.repo.lock(request.game_id):
            deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise NotFoundError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_state_response(self, game: Game) -> GameStateResponse:
        """Public view of the Game. The hidden field never leaves the service."""
        public = game.to_model()
        return GameStateResponse(
            field=public.field,
            players=public.players,
            count=game.scoreboard.to_wire(),
            winner=public.winner,
            status=game.status,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise NotFoundError(f"Game with game_id={game_id} not found.")
        return game_model
