"""
Board state engine: occupancy plus tactical metadata kept in step with it.
Teaching notes:
- Occupancy is a flat list of 9 cells (None or a Marker), indexed by flat index.
- Every `place` refreshes the metadata of the 2-4 lines through the filled cell.
  The cache always equals `derive_metadata(cells)`; a filled cell can never stay
  a winning move or a fork target because every line holding it was refreshed.
- A win can only be created by the latest move, so `evaluate_state` looks at the
  lines through that move and nothing else.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from .cells import (
    ALL_CELLS,
    CORNERS,
    EDGES,
    EMPTY_SYMBOL,
    CellClass,
    CellCoord,
    GameStatus,
    InvalidMoveError,
    Marker,
    MoveResult,
)
from .lines import Line, lines_through
from .tactics import TacticalMetadata, forking_moves

_SYMBOLS = {'X': Marker.X, 'O': Marker.O, '_': None, '.': None}


class Board:
    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self._cells: List[Optional[Marker]] = [None] * 9
        self._marker_count = 0
        self._meta = TacticalMetadata()
        self._corner_pool: List[CellCoord] = list(CORNERS)
        self._edge_pool: List[CellCoord] = list(EDGES)
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    @classmethod
    def from_string(cls, text: str, seed: Optional[int] = None) -> "Board":
        """Build a board from 9 symbols (X, O, _ or .), row by row.

        Whitespace and '/' separators are ignored, so "XO_/_X_/__O" works.
        """
        raw = ''.join(ch for ch in text.upper() if not ch.isspace() and ch != '/')
        if len(raw) != 9 or any(ch not in _SYMBOLS for ch in raw):
            raise ValueError(f"Invalid board string {text!r}. Must be 9 of X, O, _ or '.'.")
        board = cls(seed=seed)
        for i, ch in enumerate(raw):
            marker = _SYMBOLS[ch]
            if marker is not None:
                board.place(CellCoord.from_index(i), marker)
        return board

    # --- primary state -------------------------------------------------

    @property
    def marker_count(self) -> int:
        return self._marker_count

    @property
    def is_full(self) -> bool:
        return self._marker_count == 9

    @property
    def cells(self) -> Tuple[Optional[Marker], ...]:
        return tuple(self._cells)

    def cell(self, coord: CellCoord) -> Optional[Marker]:
        return self._cells[coord.flat_index]

    def is_empty(self, coord: CellCoord) -> bool:
        return self._cells[coord.flat_index] is None

    def empty_cells(self) -> List[CellCoord]:
        return [c for c in ALL_CELLS if self._cells[c.flat_index] is None]

    def count(self, marker: Marker) -> int:
        return sum(1 for v in self._cells if v is marker)

    def side_to_move(self) -> Marker:
        """X moves first, so X is to move whenever the counts are equal."""
        return Marker.X if self.count(Marker.X) == self.count(Marker.O) else Marker.O

    def validate(self, coord: CellCoord) -> MoveResult:
        if not coord.in_bounds:
            return MoveResult.OUT_OF_BOUNDS
        if self._cells[coord.flat_index] is not None:
            return MoveResult.ALREADY_OCCUPIED
        return MoveResult.VALID

    def place(self, coord: CellCoord, marker: Marker) -> None:
        result = self.validate(coord)
        if result is not MoveResult.VALID:
            logging.debug("rejected placement of %s at %s: %s", marker.symbol, coord, result.value)
            raise InvalidMoveError(coord, result)
        self._cells[coord.flat_index] = marker
        self._marker_count += 1
        for line in lines_through(coord):
            self._meta.refresh_line(self._cells, line)
        if coord.cell_class is CellClass.CORNER:
            self._corner_pool = [c for c in self._corner_pool if self.is_empty(c)]
        elif coord.cell_class is CellClass.EDGE:
            self._edge_pool = [c for c in self._edge_pool if self.is_empty(c)]

    def evaluate_state(self, last_move: CellCoord, marker: Marker) -> GameStatus:
        for line in lines_through(last_move):
            if all(self._cells[c.flat_index] is marker for c in line.cells):
                return GameStatus.WIN
        if self._marker_count == 9:
            return GameStatus.TIE
        return GameStatus.PLAYING

    # --- tactical queries ----------------------------------------------

    def winning_move_for(self, marker: Marker) -> Optional[CellCoord]:
        moves = self._meta.winning_moves(marker)
        return moves[0] if moves else None

    def winning_moves_for(self, marker: Marker) -> Set[CellCoord]:
        return set(self._meta.winning_moves(marker))

    def forking_moves_for(self, marker: Marker) -> Set[CellCoord]:
        return forking_moves(self._cells, self._meta.fork_candidates(marker))

    def single_marker_sets_for(self, marker: Marker) -> List[Tuple[CellCoord, Line]]:
        return self._meta.fork_candidates(marker)

    def corner_move(self, rng: Optional[np.random.Generator] = None) -> Optional[CellCoord]:
        return self._pick(self._corner_pool, rng)

    def edge_move(self, rng: Optional[np.random.Generator] = None) -> Optional[CellCoord]:
        return self._pick(self._edge_pool, rng)

    def available_corner_moves(self) -> List[CellCoord]:
        return list(self._corner_pool)

    def available_edge_moves(self) -> List[CellCoord]:
        return list(self._edge_pool)

    def _pick(self, pool: Sequence[CellCoord], rng: Optional[np.random.Generator]) -> Optional[CellCoord]:
        if not pool:
            return None
        gen = rng if rng is not None else self._rng
        return pool[int(gen.integers(len(pool)))]

    def metadata(self) -> TacticalMetadata:
        return self._meta.copy()

    # --- display -------------------------------------------------------

    def cell_symbol(self, flat_index: int) -> str:
        v = self._cells[flat_index]
        return v.symbol if v is not None else EMPTY_SYMBOL

    def display_state(self) -> List[List[str]]:
        return [[self.cell_symbol(r * 3 + c) for c in range(3)] for r in range(3)]

    def render(self) -> str:
        return '\n'.join(' '.join(row) for row in self.display_state())

    def key(self) -> str:
        return ''.join(self.cell_symbol(i) for i in range(9))

    def copy(self) -> "Board":
        """Independent occupancy and metadata; the random source is shared."""
        other = Board.__new__(Board)
        other._cells = list(self._cells)
        other._marker_count = self._marker_count
        other._meta = self._meta.copy()
        other._corner_pool = list(self._corner_pool)
        other._edge_pool = list(self._edge_pool)
        other._rng = self._rng
        return other

    def __repr__(self) -> str:
        return f"Board({self.key()!r})"
