"""Implementation of (Game)Repository using SQLAlchemy"""

from contextlib import AbstractContextManager
from copy import deepcopy
from typing import Callable, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.locks import KeyedLocks
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy

    NOTE the KeyedLocks only serialize access within this process. Pass the same instance to every repository
    created for the same database (one per request/session), otherwise each of them locks on its own.
    """

    def __init__(
        self,
        db_session: Session,
        id_factory: Callable[[], UUID] = uuid4,
        locks: Optional[KeyedLocks] = None,
    ) -> None:
        self.db = db_session
        self._new_id = id_factory
        self._locks = locks or KeyedLocks()

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = self._new_id()
        game_db = DBGame(
            id=new_id,
            field_width=game.field_width,
            field_height=game.field_height,
            diamonds_quantity=game.diamonds_quantity,
            hidden_field=deepcopy(game.hidden_field),
            field=deepcopy(game.field),
            players=list(game.players),
            scores=dict(game.scores),
            total=game.total,
            winner=game.winner,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record. Parameters and hidden field never change after creation."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        # assign fresh containers: JSON columns do not track in-place mutation
        game_db.field = deepcopy(game.field)
        game_db.players = list(game.players)
        game_db.scores = dict(game.scores)
        game_db.total = game.total
        game_db.winner = game.winner
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def lock(self, game_id: UUID) -> AbstractContextManager[None]:
        return self._locks.hold(game_id)

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            field_width=game_db.field_width,
            field_height=game_db.field_height,
            diamonds_quantity=game_db.diamonds_quantity,
            hidden_field=deepcopy(game_db.hidden_field),
            field=deepcopy(game_db.field),
            players=list(game_db.players),
            scores=dict(game_db.scores),
            total=game_db.total,
            winner=game_db.winner,
        )
