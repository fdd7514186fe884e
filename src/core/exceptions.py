"""
Custom exceptions shared across layers.

Everything raised on purpose by the domain, service and repository layers derives from GameError,
so the API layer only has to catch one type to turn a failure into an error response.
"""

from typing import Optional


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a game."""


# --- INPUT ---
class ValidationError(GameError):
    """Creation or move input has the wrong shape or is out of bounds."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidCoordinateError(ValidationError):
    """Cell coordinates are not integers or fall outside of the field."""


# --- LOOKUP ---
class NotFoundError(GameError):
    """No game is stored under the requested ID."""


# --- GAME STATE ---
class GameStateError(GameError):
    """The request is well-formed, but the game is not in a state that allows it."""


class GameFullError(GameStateError):
    pass


class DuplicatePlayerError(GameStateError):
    pass


class GameOverError(GameStateError):
    pass


class CellAlreadyRevealedError(GameStateError):
    pass


# --- PLAYERS / TURNS ---
class PlayerNotInGameError(GameError):
    pass


class NotYourTurnError(GameError):
    pass


class WaitingForPlayersError(NotYourTurnError):
    """Nobody has the turn until the roster is complete."""
