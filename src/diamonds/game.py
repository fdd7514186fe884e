"""
The Game class is the entrypoint into the domain layer for the service layer.
It owns the rules of a single diamond hunt: who may join, whose turn it is, what a reveal does to the public field,
and when (and by whom) the game is won. The service layer only moves GameModels between the Game and the repository.
"""

import random
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import (
    CellAlreadyRevealedError,
    DuplicatePlayerError,
    GameFullError,
    GameOverError,
    NotYourTurnError,
    PlayerNotInGameError,
    ValidationError,
    WaitingForPlayersError,
)
from src.core.models import GameModel, Grid, PlayerId, PublicGrid
from src.core.shared_types import DIAMOND, TOTAL_KEY, Status
from src.diamonds.field import generate_field
from src.diamonds.params import GameParameters, validate_coordinates, validate_parameters
from src.diamonds.scoreboard import ScoreBoard

MAX_PLAYERS = 2


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    params: GameParameters
    hidden_field: Grid
    field: PublicGrid
    players: list[PlayerId]  # head of the list has the turn
    scoreboard: ScoreBoard
    winner: Optional[PlayerId]

    @classmethod
    def new_game(
        cls,
        field_width: int,
        field_height: int,
        diamonds_quantity: int,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """Validate the parameters and seed a fresh field. Nobody has joined yet."""
        params = validate_parameters(field_width, field_height, diamonds_quantity)
        hidden_field = generate_field(params, rng or random.Random())
        return cls(
            params=params,
            hidden_field=hidden_field,
            field=[[None] * params.field_width for _ in range(params.field_height)],
            players=[],
            scoreboard=ScoreBoard(),
            winner=None,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has.

        NOTE copies the nested lists, so mutating the Game never mutates a model a repository may still hold on to.
        """
        params = GameParameters(
            model.field_width, model.field_height, model.diamonds_quantity
        )
        return cls(
            params=params,
            hidden_field=deepcopy(model.hidden_field),
            field=deepcopy(model.field),
            players=list(model.players),
            scoreboard=ScoreBoard(scores=dict(model.scores), total=model.total),
            winner=model.winner,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            field_width=self.params.field_width,
            field_height=self.params.field_height,
            diamonds_quantity=self.params.diamonds_quantity,
            hidden_field=deepcopy(self.hidden_field),
            field=deepcopy(self.field),
            players=list(self.players),
            scores=dict(self.scoreboard.scores),
            total=self.scoreboard.total,
            winner=self.winner,
        )

    @property
    def status(self) -> Status:
        if self.is_finished:
            return Status.FINISHED
        if len(self.players) < MAX_PLAYERS:
            return Status.WAITING_FOR_PLAYERS
        return Status.IN_PLAY

    @property
    def is_finished(self) -> bool:
        """All diamonds found. The winner may still be None (tie)."""
        return self.scoreboard.total == self.params.diamonds_quantity

    @property
    def turn_player(self) -> Optional[PlayerId]:
        return self.players[0] if self.players else None

    def register_player(self, player: PlayerId) -> None:
        """Add a player to the back of the turn queue."""
        if not isinstance(player, str) or not player:
            raise ValidationError(
                f"Player ID must be a non-empty string, got {player!r}", field="player_id"
            )
        if player == TOTAL_KEY:
            raise ValidationError(
                f"Player ID {player!r} is reserved", field="player_id"
            )
        if len(self.players) >= MAX_PLAYERS:
            raise GameFullError(f"Game is full, max players: {MAX_PLAYERS}")
        if player in self.players:
            raise DuplicatePlayerError(f"Player {player} already in game")

        self.players.append(player)
        self.scoreboard.add_player(player)

    def reveal(self, player: PlayerId, x: int, y: int) -> int:
        """
        Reveal the cell at (x, y) on behalf of `player`.
        ----

        Checks, in this order (all of them before anything changes):
        1. game is not finished yet
        2. coordinates are integers on the field
        3. player is part of this game
        4. it is the player's turn (which requires a full roster)
        5. the cell is still hidden

        Then:
        * diamond --> score it, keep the turn, and settle the winner once the last diamond is found
        * hint --> pass the turn to the next player

        Returns the revealed value.
        """
        if self.is_finished:
            raise GameOverError(
                f"Game is already over. Winner: {self.winner if self.winner else 'none (tie)'}"
            )
        validate_coordinates(self.params, x, y)
        if player not in self.players:
            raise PlayerNotInGameError(f"Player {player} not found in game")
        self._assert_your_turn(player)
        if self.field[y][x] is not None:
            raise CellAlreadyRevealedError(f"Cell ({x}, {y}) is already opened")

        revealed = self.hidden_field[y][x]
        self.field[y][x] = revealed

        if revealed == DIAMOND:
            self.scoreboard.score_diamond(player)
            if self.is_finished:
                self._settle_winner()
        else:
            self._pass_turn()

        return revealed

    # -- PRIVATE HELPERS ---
    def _assert_your_turn(self, player: PlayerId) -> None:
        if len(self.players) < MAX_PLAYERS:
            raise WaitingForPlayersError(
                f"Waiting for players: {len(self.players)}/{MAX_PLAYERS} joined."
            )
        if player != self.turn_player:
            raise NotYourTurnError(
                f"It's not player {player}'s turn. Waiting for player {self.turn_player} to make a move first."
            )

    def _pass_turn(self) -> None:
        self.players.append(self.players.pop(0))

    def _settle_winner(self) -> None:
        """Called exactly once: on the reveal of the last diamond."""
        self.winner = self.scoreboard.leader(self.players)
