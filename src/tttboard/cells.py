"""
Cell model: markers, coordinates and structural classes.
Teaching notes:
- A coordinate is a plain value: (row, column), row 0 at the top.
- The flat index row*3+column is the key used everywhere cells live in arrays.
- Corners, edges and the center are fixed sets; a cell's class never changes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

BOARD_SIZE = 3
EMPTY_SYMBOL = '_'


class Marker(Enum):
    X = 'X'
    O = 'O'

    @property
    def symbol(self) -> str:
        return self.value

    def opposite(self) -> "Marker":
        return Marker.O if self is Marker.X else Marker.X


class CellClass(Enum):
    CORNER = 'corner'
    EDGE = 'edge'
    CENTER = 'center'


class MoveResult(Enum):
    VALID = 'valid'
    ALREADY_OCCUPIED = 'already_occupied'
    OUT_OF_BOUNDS = 'out_of_bounds'


class GameStatus(Enum):
    WIN = 'win'
    TIE = 'tie'
    PLAYING = 'playing'


class InvalidMoveError(ValueError):
    """Raised when a placement targets a cell that did not validate."""

    def __init__(self, coord: "CellCoord", result: MoveResult):
        super().__init__(f"cannot place at ({coord.row}, {coord.column}): {result.value}")
        self.coord = coord
        self.result = result


class MovePoolExhausted(RuntimeError):
    """A pre-generated move set ran dry; a game never needs more than 9 moves."""


_CORNER_RC = {(0, 0), (0, 2), (2, 2), (2, 0)}
_EDGE_RC = {(0, 1), (1, 2), (2, 1), (1, 0)}
_CENTER_RC = {(1, 1)}


def _classify(row: int, column: int) -> Optional[CellClass]:
    rc = (row, column)
    if rc in _CORNER_RC:
        return CellClass.CORNER
    if rc in _EDGE_RC:
        return CellClass.EDGE
    if rc in _CENTER_RC:
        return CellClass.CENTER
    return None


@dataclass(frozen=True, order=True)
class CellCoord:
    """A cell on the grid.

    Construction never validates the range; out-of-range coordinates exist so
    that `Board.validate` can report them. Their `cell_class` is None.
    """
    row: int
    column: int
    cell_class: Optional[CellClass] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'cell_class', _classify(self.row, self.column))

    @classmethod
    def from_index(cls, index: int) -> "CellCoord":
        if not 0 <= index < BOARD_SIZE * BOARD_SIZE:
            raise ValueError(f"flat index out of range: {index}")
        return cls(index // BOARD_SIZE, index % BOARD_SIZE)

    @property
    def flat_index(self) -> int:
        return self.row * BOARD_SIZE + self.column

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.column < BOARD_SIZE

    def as_tuple(self) -> Tuple[int, int]:
        return (self.row, self.column)

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"


ALL_CELLS: Tuple[CellCoord, ...] = tuple(CellCoord.from_index(i) for i in range(9))
# Clockwise from the top-left; pool order follows this.
CORNERS: Tuple[CellCoord, ...] = (CellCoord(0, 0), CellCoord(0, 2), CellCoord(2, 2), CellCoord(2, 0))
EDGES: Tuple[CellCoord, ...] = (CellCoord(0, 1), CellCoord(1, 2), CellCoord(2, 1), CellCoord(1, 0))
CENTER = CellCoord(1, 1)
