"""
Tactics as a pure function of occupancy: immediate wins, fork candidates, forks.
Teaching notes:
- Each line contributes independently. A line owned by one marker with two of
  its cells filled yields a winning move (its empty cell); with one cell filled
  it yields a single-marker set (that cell, the line). Mixed lines yield nothing.
- Because contributions are per line, a cache keyed by line can be patched by
  refreshing only the lines through a newly filled cell.
- Forks are intersections of two single-marker lines at an empty cell.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from .cells import CellCoord, Marker
from .lines import LINE_ORDER, LINES, Line, line_intersection

Cells = Sequence[Optional[Marker]]


class LineTally(NamedTuple):
    x_cells: Tuple[CellCoord, ...]
    o_cells: Tuple[CellCoord, ...]
    empty_cells: Tuple[CellCoord, ...]

    @property
    def owner(self) -> Optional[Marker]:
        """Sole marker on a line, None for empty or mixed lines."""
        if self.x_cells and not self.o_cells:
            return Marker.X
        if self.o_cells and not self.x_cells:
            return Marker.O
        return None

    def occupied_by(self, marker: Marker) -> Tuple[CellCoord, ...]:
        return self.x_cells if marker is Marker.X else self.o_cells


def tally_line(cells: Cells, line: Line) -> LineTally:
    xs: List[CellCoord] = []
    os_: List[CellCoord] = []
    empties: List[CellCoord] = []
    for coord in line.cells:
        v = cells[coord.flat_index]
        if v is Marker.X:
            xs.append(coord)
        elif v is Marker.O:
            os_.append(coord)
        else:
            empties.append(coord)
    return LineTally(tuple(xs), tuple(os_), tuple(empties))


def _per_marker() -> Dict[Marker, Dict[Line, CellCoord]]:
    return {m: {} for m in Marker}


@dataclass
class TacticalMetadata:
    """Derived state, keyed by line so it can be refreshed one line at a time.

    winning[m][line] -> the empty cell completing `line` for m
    singles[m][line] -> the only cell of `line` occupied (by m); the rest empty
    """
    winning: Dict[Marker, Dict[Line, CellCoord]] = field(default_factory=_per_marker)
    singles: Dict[Marker, Dict[Line, CellCoord]] = field(default_factory=_per_marker)

    def refresh_line(self, cells: Cells, line: Line) -> None:
        for m in Marker:
            self.winning[m].pop(line, None)
            self.singles[m].pop(line, None)
        tally = tally_line(cells, line)
        owner = tally.owner
        if owner is None:
            return
        mine = tally.occupied_by(owner)
        if len(mine) == 2:
            self.winning[owner][line] = tally.empty_cells[0]
        elif len(mine) == 1:
            self.singles[owner][line] = mine[0]

    def winning_moves(self, marker: Marker) -> List[CellCoord]:
        """Distinct winning cells in line order."""
        out: List[CellCoord] = []
        by_line = self.winning[marker]
        for line in LINES:
            c = by_line.get(line)
            if c is not None and c not in out:
                out.append(c)
        return out

    def fork_candidates(self, marker: Marker) -> List[Tuple[CellCoord, Line]]:
        by_line = self.singles[marker]
        return [(by_line[line], line) for line in sorted(by_line, key=LINE_ORDER.__getitem__)]

    def copy(self) -> "TacticalMetadata":
        return TacticalMetadata(
            {m: dict(d) for m, d in self.winning.items()},
            {m: dict(d) for m, d in self.singles.items()},
        )


def derive_metadata(cells: Cells) -> TacticalMetadata:
    """Full rescan of all eight lines."""
    meta = TacticalMetadata()
    for line in LINES:
        meta.refresh_line(cells, line)
    return meta


def forking_moves(cells: Cells, candidates: Sequence[Tuple[CellCoord, Line]]) -> Set[CellCoord]:
    forks: Set[CellCoord] = set()
    for i, (c1, l1) in enumerate(candidates):
        for c2, l2 in candidates[i + 1:]:
            if c1 == c2 or l1 == l2:
                continue
            meet = line_intersection(l1, l2)
            if meet is not None and cells[meet.flat_index] is None:
                forks.add(meet)
    return forks


def immediate_winning_moves(cells: Cells, marker: Marker) -> List[CellCoord]:
    return derive_metadata(cells).winning_moves(marker)


def fork_moves(cells: Cells, marker: Marker) -> Set[CellCoord]:
    return forking_moves(cells, derive_metadata(cells).fork_candidates(marker))
