"""The hidden field: where the diamonds are, and the hint numbers around them."""

import random
from typing import Iterator

from src.core.models import Grid
from src.core.shared_types import DIAMOND
from src.diamonds.params import GameParameters

# The 8 surrounding cells (Chebyshev distance 1)
NEIGHBOUR_OFFSETS = [
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
]


def neighbours(x: int, y: int, width: int, height: int) -> Iterator[tuple[int, int]]:
    """Coordinates of the in-bounds neighbours of (x, y). Edge and corner cells have fewer."""
    for dx, dy in NEIGHBOUR_OFFSETS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height:
            yield nx, ny


def generate_field(params: GameParameters, rng: random.Random) -> Grid:
    """
    Create the hidden field for a new game.
    ----

    1. Sample random cells until `diamonds_quantity` distinct ones are marked as diamonds.
       (Rejection sampling: fields have at most 36 cells and never get completely filled, so this terminates quickly.)
    2. Every other cell gets the number of diamonds among its neighbours.

    Only `rng` gets consumed, so the same seed always gives the same field.
    """
    width, height = params.field_width, params.field_height
    field: Grid = [[0] * width for _ in range(height)]

    placed = 0
    while placed < params.diamonds_quantity:
        x = rng.randrange(width)
        y = rng.randrange(height)
        if field[y][x] != DIAMOND:
            field[y][x] = DIAMOND
            placed += 1

    for y in range(height):
        for x in range(width):
            if field[y][x] == DIAMOND:
                continue
            field[y][x] = sum(
                1 for nx, ny in neighbours(x, y, width, height) if field[ny][nx] == DIAMOND
            )

    return field


def count_diamonds(field: Grid) -> int:
    return sum(row.count(DIAMOND) for row in field)
