"""Unit tests for src/services/diamond_service.py"""

import random
import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Iterator
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import (
    CellAlreadyRevealedError,
    GameError,
    GameFullError,
    GameOverError,
    InvalidCoordinateError,
    NotFoundError,
    NotYourTurnError,
    ValidationError,
)
from src.core.models import GameModel
from src.core.shared_types import DIAMOND, Status
from src.db.memory_repository import InMemoryGameRepository
from src.services.diamond_service import (
    CreateGameRequest,
    DeleteGameRequest,
    DiamondService,
    GameCreatedResponse,
    GameStateResponse,
    GetGameRequest,
    JoinGameRequest,
    RevealRequest,
)


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def lock(self, game_id: UUID) -> AbstractContextManager[None]:
        return nullcontext()

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Iterator[MockRepository]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> DiamondService:
    return DiamondService(mock_repository, rng=random.Random(2024))


def create_two_player_game(
    service: DiamondService, width: int = 2, height: int = 2, diamonds: int = 1
) -> UUID:
    created = service.create_new_game(
        CreateGameRequest(field_width=width, field_height=height, diamonds_quantity=diamonds)
    )
    service.join_game(JoinGameRequest(game_id=created.game_id, player_id="alice"))
    service.join_game(JoinGameRequest(game_id=created.game_id, player_id="bob"))
    return created.game_id


def find_cells(repository: MockRepository, game_id: UUID, diamond: bool) -> list[tuple[int, int]]:
    """Peek at the hidden field in the repository: test code knows where the diamonds are."""
    stored = repository.get_game(game_id)
    assert stored is not None
    return [
        (x, y)
        for y, row in enumerate(stored.hidden_field)
        for x, value in enumerate(row)
        if (value == DIAMOND) == diamond
    ]


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: DiamondService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    request = CreateGameRequest(fieldWidth=2, fieldHeight=2, diamondsQuantity=1)
    response = service.create_new_game(request)

    # Check response structure
    assert isinstance(response, GameCreatedResponse)
    assert isinstance(response.game_id, UUID)

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.field == [[None, None], [None, None]]
    assert stored_game.players == []
    assert stored_game.scores == {}
    assert stored_game.total == 0
    assert stored_game.winner is None
    assert sum(row.count(DIAMOND) for row in stored_game.hidden_field) == 1


def test_create_with_even_diamonds(service: DiamondService, mock_repository: MockRepository) -> None:
    """Make sure service propagates the exceptions, without storing anything."""
    with pytest.raises(ValidationError):
        service.create_new_game(
            CreateGameRequest(field_width=3, field_height=3, diamonds_quantity=4)
        )
    assert mock_repository._games == {}


def test_seeded_services_create_identical_fields() -> None:
    repo_a, repo_b = MockRepository(), MockRepository()
    request = CreateGameRequest(field_width=6, field_height=6, diamonds_quantity=13)
    id_a = DiamondService(repo_a, rng=random.Random(5)).create_new_game(request).game_id
    id_b = DiamondService(repo_b, rng=random.Random(5)).create_new_game(request).game_id

    game_a, game_b = repo_a.get_game(id_a), repo_b.get_game(id_b)
    assert game_a is not None and game_b is not None
    assert game_a.hidden_field == game_b.hidden_field


# --- SERVICE - JOIN GAME ----
def test_players_join_game(service: DiamondService, mock_repository: MockRepository) -> None:
    created = service.create_new_game(
        CreateGameRequest(field_width=2, field_height=2, diamonds_quantity=1)
    )

    first = service.join_game(JoinGameRequest(game_id=created.game_id, player_id="alice"))
    assert first.players == ["alice"]
    assert first.status == Status.WAITING_FOR_PLAYERS

    second = service.join_game(JoinGameRequest(game_id=created.game_id, playerId="bob"))

    # Check response data
    assert isinstance(second, GameStateResponse)
    assert second.players == ["alice", "bob"]
    assert second.count == {"alice": 0, "bob": 0, "total": 0}
    assert second.winner is None
    assert second.status == Status.IN_PLAY

    # Check persisted data
    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.players == ["alice", "bob"]
    assert stored_game.scores == {"alice": 0, "bob": 0}


def test_third_player_cannot_join(service: DiamondService) -> None:
    game_id = create_two_player_game(service)
    with pytest.raises(GameFullError):
        service.join_game(JoinGameRequest(game_id=game_id, player_id="carol"))


def test_cannot_join_unknown_game(service: DiamondService) -> None:
    with pytest.raises(NotFoundError):
        service.join_game(JoinGameRequest(game_id=uuid4(), player_id="alice"))


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(service: DiamondService) -> None:
    game_id = create_two_player_game(service, width=3, height=2, diamonds=3)
    response = service.get_game_state(GetGameRequest(game_id=game_id))

    assert response.field == [[None, None, None], [None, None, None]]
    assert response.players == ["alice", "bob"]
    assert response.count == {"alice": 0, "bob": 0, "total": 0}
    assert response.winner is None


def test_state_never_exposes_hidden_field(service: DiamondService) -> None:
    game_id = create_two_player_game(service)
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert "hidden_field" not in response.model_dump()


def test_attempt_to_find_unknown_game(service: DiamondService) -> None:
    """Ensure exception is raised when trying to look up a game with an unknown ID."""
    with pytest.raises(GameError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - REVEAL ---
def test_reveal_hint_passes_turn(service: DiamondService, mock_repository: MockRepository) -> None:
    game_id = create_two_player_game(service, width=3, height=3, diamonds=3)
    x, y = find_cells(mock_repository, game_id, diamond=False)[0]

    response = service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))

    assert response.field[y][x] is not None
    assert response.field[y][x] != DIAMOND
    assert response.players == ["bob", "alice"]

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.field == response.field


def test_reveal_diamond_keeps_turn(service: DiamondService, mock_repository: MockRepository) -> None:
    game_id = create_two_player_game(service, width=3, height=3, diamonds=3)
    x, y = find_cells(mock_repository, game_id, diamond=True)[0]

    response = service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))

    assert response.field[y][x] == DIAMOND
    assert response.players == ["alice", "bob"]
    assert response.count == {"alice": 1, "bob": 0, "total": 1}


def test_winning_reveal_ends_the_game(service: DiamondService, mock_repository: MockRepository) -> None:
    """2x2 field with one diamond: alice finds it, wins, and bob cannot move anymore."""
    game_id = create_two_player_game(service)
    [(x, y)] = find_cells(mock_repository, game_id, diamond=True)

    response = service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))
    assert response.winner == "alice"
    assert response.status == Status.FINISHED
    assert response.count["total"] == 1

    free_x, free_y = find_cells(mock_repository, game_id, diamond=False)[0]
    with pytest.raises(GameOverError):
        service.reveal_cell(RevealRequest(game_id=game_id, player_id="bob", x=free_x, y=free_y))


def test_failed_reveal_is_not_stored(service: DiamondService, mock_repository: MockRepository) -> None:
    game_id = create_two_player_game(service, width=3, height=3, diamonds=3)
    before = mock_repository.get_game(game_id)

    with pytest.raises(InvalidCoordinateError):
        service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=-1, y=0))
    with pytest.raises(InvalidCoordinateError):
        service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=3, y=0))
    with pytest.raises(NotYourTurnError):
        service.reveal_cell(RevealRequest(game_id=game_id, player_id="bob", x=0, y=0))

    assert mock_repository.get_game(game_id) == before


def test_reveal_same_cell_twice(service: DiamondService, mock_repository: MockRepository) -> None:
    game_id = create_two_player_game(service, width=3, height=3, diamonds=3)
    x, y = find_cells(mock_repository, game_id, diamond=True)[0]
    first = service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))

    with pytest.raises(CellAlreadyRevealedError):
        service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))
    assert service.get_game_state(GetGameRequest(game_id=game_id)) == first


def test_reveal_in_unknown_game(service: DiamondService) -> None:
    with pytest.raises(NotFoundError):
        service.reveal_cell(RevealRequest(game_id=uuid4(), player_id="alice", x=0, y=0))


# --- SERVICE - DELETE GAME ---
def test_delete_game_from_repository(service: DiamondService) -> None:
    """A game should no longer be available in the repository after a properly processed request."""
    game_id = create_two_player_game(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))

    with pytest.raises(NotFoundError):
        service.get_game_state(GetGameRequest(game_id=game_id))


def test_delete_unknown_game(service: DiamondService) -> None:
    with pytest.raises(NotFoundError):
        service.delete_game(DeleteGameRequest(game_id=uuid4()))


# --- SERVICE - CONCURRENCY ---
def test_concurrent_reveals_of_one_cell() -> None:
    """Many threads race to reveal the same cell as the turn player: exactly one of them may succeed."""
    repository = InMemoryGameRepository()
    service = DiamondService(repository, rng=random.Random(3))
    game_id = create_two_player_game(service, width=6, height=6, diamonds=11)
    stored = repository.get_game(game_id)
    assert stored is not None
    x, y = next(
        (x, y)
        for y, row in enumerate(stored.hidden_field)
        for x, value in enumerate(row)
        if value == DIAMOND
    )

    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def attempt() -> None:
        barrier.wait()
        try:
            service.reveal_cell(RevealRequest(game_id=game_id, player_id="alice", x=x, y=y))
            result = "ok"
        except CellAlreadyRevealedError:
            result = "already revealed"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("already revealed") == 7
    state = service.get_game_state(GetGameRequest(game_id=game_id))
    assert state.count == {"alice": 1, "bob": 0, "total": 1}
