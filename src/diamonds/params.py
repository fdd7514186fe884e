"""
Structural validation of game parameters and move coordinates.

Nothing here touches a game's state, so every check can run before a single cell is generated or revealed.
"""

from dataclasses import dataclass
from typing import Any

from src.core.exceptions import InvalidCoordinateError, ValidationError

MIN_FIELD_SIZE = 2
MAX_FIELD_SIZE = 6


def is_integer(value: Any) -> bool:
    """bool is a subclass of int in Python, but True is not a field size."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class GameParameters:
    field_width: int
    field_height: int
    diamonds_quantity: int

    @property
    def cell_count(self) -> int:
        return self.field_width * self.field_height

    def contains(self, x: int, y: int) -> bool:
        return (0 <= x < self.field_width) and (0 <= y < self.field_height)


def validate_parameters(
    field_width: Any, field_height: Any, diamonds_quantity: Any
) -> GameParameters:
    """
    Check the raw creation parameters, in order: width, height, diamonds.
    ----

    * width and height: integers between MIN_FIELD_SIZE and MAX_FIELD_SIZE (inclusive)
    * diamonds: a positive odd integer, strictly less than the number of cells

    The first failing parameter is reported.
    """
    _validate_size("field_width", field_width)
    _validate_size("field_height", field_height)

    cell_count = field_width * field_height
    if (
        not is_integer(diamonds_quantity)
        or diamonds_quantity < 1
        or diamonds_quantity % 2 == 0
        or diamonds_quantity >= cell_count
    ):
        raise ValidationError(
            f"Diamonds quantity must be an odd number and less than {cell_count}, got {diamonds_quantity!r}",
            field="diamonds_quantity",
        )

    return GameParameters(field_width, field_height, diamonds_quantity)


def validate_coordinates(params: GameParameters, x: Any, y: Any) -> None:
    """x counts columns (0 .. width-1), y counts rows (0 .. height-1)."""
    for name, value in (("x", x), ("y", y)):
        if not is_integer(value):
            raise InvalidCoordinateError(
                f"Cell coordinates must be integers, got ({x!r}, {y!r})", field=name
            )
    if not params.contains(x, y):
        raise InvalidCoordinateError(
            f"Invalid cell coordinates: ({x}, {y}). Field is {params.field_width}x{params.field_height}",
            field="x" if not 0 <= x < params.field_width else "y",
        )


def _validate_size(name: str, value: Any) -> None:
    if not is_integer(value) or not (MIN_FIELD_SIZE <= value <= MAX_FIELD_SIZE):
        label = name.replace("_", " ").capitalize()
        raise ValidationError(
            f"{label} must be an integer between {MIN_FIELD_SIZE} and {MAX_FIELD_SIZE}, got {value!r}",
            field=name,
        )
