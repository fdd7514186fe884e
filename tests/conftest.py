"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import GameModel, Grid
from src.db.schema import Base
from src.diamonds.game import Game
from src.diamonds.params import GameParameters
from src.diamonds.scoreboard import ScoreBoard

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def game_with_field() -> Callable[..., Game]:
    """Call the inner function with a hidden field (and optionally the players) to get a Game without any randomness."""

    def _create_game(
        hidden_field: list[list[int]], diamonds: int, players: tuple[str, ...] = ()
    ) -> Game:
        height = len(hidden_field)
        width = len(hidden_field[0])
        game = Game(
            params=GameParameters(width, height, diamonds),
            hidden_field=[list(row) for row in hidden_field],
            field=[[None] * width for _ in range(height)],
            players=[],
            scoreboard=ScoreBoard(),
            winner=None,
        )
        for player in players:
            game.register_player(player)
        return game

    return _create_game


@pytest.fixture
def one_diamond_field() -> Grid:
    """2x2 field with a single diamond on (x=0, y=0)"""
    return [
        [9, 1],
        [1, 1],
    ]


@pytest.fixture
def mock_game_model(one_diamond_field: Grid) -> GameModel:
    """Freshly created 2x2 game with one diamond and nobody joined yet."""
    return GameModel(
        field_width=2,
        field_height=2,
        diamonds_quantity=1,
        hidden_field=one_diamond_field,
        field=[[None, None], [None, None]],
        players=[],
        scores={},
        total=0,
        winner=None,
    )
