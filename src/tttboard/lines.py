"""
The eight winning lines and their geometry.
Teaching notes:
- Lines are fixed: 3 rows, 3 columns, the main diagonal and the anti-diagonal.
- Two distinct lines meet in at most one cell. Which cell depends only on the
  pair of line kinds, so intersections come from one small table keyed by the
  unordered kind pair. Same-kind pairs (two rows, two columns) never meet.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .cells import ALL_CELLS, BOARD_SIZE, CellCoord


class LineKind(Enum):
    ROW = 0
    COLUMN = 1
    DIAGONAL = 2
    ANTI_DIAGONAL = 3


@dataclass(frozen=True)
class Line:
    kind: LineKind
    index: int

    @property
    def cells(self) -> Tuple[CellCoord, CellCoord, CellCoord]:
        return _LINE_CELLS[self]

    def __contains__(self, coord: CellCoord) -> bool:
        return coord in _LINE_CELLS[self]

    def __str__(self) -> str:
        if self.kind in (LineKind.ROW, LineKind.COLUMN):
            return f"{self.kind.name.lower()} {self.index}"
        return self.kind.name.lower().replace('_', '-')


def _cells_of(line: Line) -> Tuple[CellCoord, CellCoord, CellCoord]:
    r = range(BOARD_SIZE)
    if line.kind is LineKind.ROW:
        return tuple(CellCoord(line.index, c) for c in r)  # type: ignore[return-value]
    if line.kind is LineKind.COLUMN:
        return tuple(CellCoord(c, line.index) for c in r)  # type: ignore[return-value]
    if line.kind is LineKind.DIAGONAL:
        return tuple(CellCoord(i, i) for i in r)  # type: ignore[return-value]
    return tuple(CellCoord(i, BOARD_SIZE - 1 - i) for i in r)  # type: ignore[return-value]


LINES: Tuple[Line, ...] = (
    tuple(Line(LineKind.ROW, i) for i in range(BOARD_SIZE))
    + tuple(Line(LineKind.COLUMN, i) for i in range(BOARD_SIZE))
    + (Line(LineKind.DIAGONAL, 0), Line(LineKind.ANTI_DIAGONAL, 0))
)

_LINE_CELLS: Dict[Line, Tuple[CellCoord, CellCoord, CellCoord]] = {ln: _cells_of(ln) for ln in LINES}

LINE_ORDER: Dict[Line, int] = {ln: i for i, ln in enumerate(LINES)}

# flat index -> lines through that cell (2 for edges, 3 for corners, 4 for the center)
LINES_THROUGH: Tuple[Tuple[Line, ...], ...] = tuple(
    tuple(ln for ln in LINES if cell in _LINE_CELLS[ln]) for cell in ALL_CELLS
)


def lines_through(coord: CellCoord) -> Tuple[Line, ...]:
    return LINES_THROUGH[coord.flat_index]


# Keyed by the unordered kind pair; the callable receives both lines sorted by kind.
_INTERSECTIONS: Dict[FrozenSet[LineKind], Callable[[Line, Line], CellCoord]] = {
    frozenset((LineKind.ROW, LineKind.COLUMN)): lambda row, col: CellCoord(row.index, col.index),
    frozenset((LineKind.ROW, LineKind.DIAGONAL)): lambda row, _: CellCoord(row.index, row.index),
    frozenset((LineKind.ROW, LineKind.ANTI_DIAGONAL)): lambda row, _: CellCoord(row.index, 2 - row.index),
    frozenset((LineKind.COLUMN, LineKind.DIAGONAL)): lambda col, _: CellCoord(col.index, col.index),
    frozenset((LineKind.COLUMN, LineKind.ANTI_DIAGONAL)): lambda col, _: CellCoord(2 - col.index, col.index),
    frozenset((LineKind.DIAGONAL, LineKind.ANTI_DIAGONAL)): lambda _a, _b: CellCoord(1, 1),
}


def line_intersection(a: Line, b: Line) -> Optional[CellCoord]:
    """Cell shared by two lines, or None for same-kind pairs."""
    if a.kind is b.kind:
        return None
    first, second = sorted((a, b), key=lambda ln: ln.kind.value)
    return _INTERSECTIONS[frozenset((first.kind, second.kind))](first, second)
