"""Implementation of (Game)Repository keeping everything in a dictionary. Lives as long as the process does."""

from contextlib import AbstractContextManager
from copy import deepcopy
from typing import Callable, Optional
from uuid import UUID, uuid4

from src.core.models import GameModel
from src.db.locks import KeyedLocks


class InMemoryGameRepository:
    """Stores copies of the GameModels, so callers can never mutate a stored game behind the repository's back."""

    def __init__(
        self,
        id_factory: Callable[[], UUID] = uuid4,
        locks: Optional[KeyedLocks] = None,
    ) -> None:
        self._games: dict[UUID, GameModel] = {}
        self._new_id = id_factory
        self._locks = locks or KeyedLocks()

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game = self._games.get(game_id)
        return deepcopy(game) if game is not None else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = self._new_id()
        if game_id in self._games:
            raise ValueError(f"Game ID {game_id} is already taken.")
        self._games[game_id] = deepcopy(game)
        return deepcopy(game), game_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = deepcopy(game)
        return deepcopy(game)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def lock(self, game_id: UUID) -> AbstractContextManager[None]:
        return self._locks.hold(game_id)
