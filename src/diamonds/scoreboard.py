"""Diamonds found per player, with the running total kept apart from the player entries."""

from dataclasses import dataclass, field
from typing import Optional

from src.core.models import PlayerId
from src.core.shared_types import TOTAL_KEY


@dataclass
class ScoreBoard:
    scores: dict[PlayerId, int] = field(default_factory=dict)
    total: int = 0

    def add_player(self, player: PlayerId) -> None:
        self.scores[player] = 0

    def score_diamond(self, player: PlayerId) -> None:
        self.scores[player] += 1
        self.total += 1

    def leader(self, order: list[PlayerId]) -> Optional[PlayerId]:
        """
        Player with the strictly highest score, scanning in the given order.

        A shared top score means there is no leader (None). So does a board where nobody scored.
        """
        best_score = 0
        best_player: Optional[PlayerId] = None
        for player in order:
            score = self.scores[player]
            if score > best_score:
                best_score = score
                best_player = player
            elif score == best_score:
                best_player = None
        return best_player

    def to_wire(self) -> dict[str, int]:
        """Player scores plus the total, as a single mapping."""
        return {**self.scores, TOTAL_KEY: self.total}
