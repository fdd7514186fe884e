"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make GameModel easier to read
PlayerId = str
Grid = list[list[int]]
PublicGrid = list[list[Optional[int]]]


@dataclass
class GameModel:
    """Transport-safe representation of a diamond hunt used between API, Service, DB, and Game layers."""

    field_width: int
    field_height: int
    diamonds_quantity: int
    hidden_field: Grid
    field: PublicGrid
    players: list[PlayerId]
    scores: dict[PlayerId, int]
    total: int
    winner: Optional[PlayerId]
