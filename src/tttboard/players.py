"""
Move-selection policies. Every player answers `get_move(board) -> CellCoord`.
Teaching notes:
- Automated players read the board's tactical metadata and never mutate the board.
- Each player owns its random source, so a seed reproduces a game exactly.
- Priority orders, strongest first:
    basic:   win, block, random
    forking: win, block, fork, block fork, random
    optimal: win, block, fork, block fork (or force a defense), center,
             opposite corner, empty corner, empty edge
    perfect: any move the exact solver rates best
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Type

import numpy as np

from .board import Board
from .cells import ALL_CELLS, CENTER, CORNERS, CellCoord, Marker, MovePoolExhausted, MoveResult
from .solver import solve_state


class Player(ABC):
    kind = 'abstract'

    def __init__(self, name: str, marker: Marker, seed: Optional[int] = None):
        self.name = name
        self.marker = marker
        self.rng = np.random.default_rng(seed)

    @property
    def opponent(self) -> Marker:
        return self.marker.opposite()

    @abstractmethod
    def get_move(self, board: Board) -> CellCoord:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, marker={self.marker.symbol})"


_REJECTIONS = {
    MoveResult.ALREADY_OCCUPIED: "Cell already marked. Please try again.",
    MoveResult.OUT_OF_BOUNDS: "Out of bounds move. Please try again.",
}


class HumanPlayer(Player):
    """Reads a column then a row from the terminal until the move validates."""
    kind = 'human'

    def __init__(
        self,
        name: str,
        marker: Marker,
        seed: Optional[int] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        super().__init__(name, marker, seed)
        self._input = input_fn
        self._output = output_fn

    def _ask(self, prompt: str) -> int:
        while True:
            raw = self._input(prompt + "\n").strip()
            try:
                return int(raw)
            except ValueError:
                self._output("Please type a number!")

    def get_move(self, board: Board) -> CellCoord:
        while True:
            self._output(f"{self.name}'s turn.")
            column = self._ask("column index (left to right)")
            row = self._ask("row index (top to bottom)")
            coord = CellCoord(row, column)
            result = board.validate(coord)
            if result is MoveResult.VALID:
                return coord
            self._output(_REJECTIONS[result])


class RandomPlayer(Player):
    """Walks a pre-shuffled list of all nine cells, skipping filled ones."""
    kind = 'random'

    def __init__(self, name: str, marker: Marker, seed: Optional[int] = None):
        super().__init__(name, marker, seed)
        self.move_set: List[CellCoord] = [ALL_CELLS[i] for i in self.rng.permutation(9)]

    def random_move(self, board: Board) -> CellCoord:
        while self.move_set:
            move = self.move_set.pop()
            if board.validate(move) is MoveResult.VALID:
                return move
        raise MovePoolExhausted(f"{self.name} ran out of generated moves. You shouldn't need this many.")

    def get_move(self, board: Board) -> CellCoord:
        return self.random_move(board)


class BasicPlayer(RandomPlayer):
    kind = 'basic'

    def tactical_move(self, board: Board) -> Optional[CellCoord]:
        move = board.winning_move_for(self.marker)
        if move is not None:
            logging.debug("%s: taking the win at %s", self.name, move)
            return move
        move = board.winning_move_for(self.opponent)
        if move is not None:
            logging.debug("%s: blocking at %s", self.name, move)
            return move
        return None

    def get_move(self, board: Board) -> CellCoord:
        move = self.tactical_move(board)
        if move is not None:
            return move
        return self.random_move(board)


class ForkingPlayer(BasicPlayer):
    kind = 'forking'

    def tactical_move(self, board: Board) -> Optional[CellCoord]:
        move = super().tactical_move(board)
        if move is not None:
            return move
        forks = sorted(board.forking_moves_for(self.marker))
        if forks:
            logging.debug("%s: making a fork at %s", self.name, forks[0])
            return forks[0]
        opp_forks = sorted(board.forking_moves_for(self.opponent))
        if opp_forks:
            logging.debug("%s: blocking forking move at %s", self.name, opp_forks[0])
            return opp_forks[0]
        return None


def _opposite_corner(coord: CellCoord) -> CellCoord:
    return CellCoord(2 - coord.row, 2 - coord.column)


class OptimalPlayer(Player):
    """Near-optimal rule-based play (Newell & Simon's ordering)."""
    kind = 'optimal'

    def get_move(self, board: Board) -> CellCoord:
        me, opp = self.marker, self.opponent

        move = board.winning_move_for(me)
        if move is not None:
            logging.debug("%s: taking the win at %s", self.name, move)
            return move
        move = board.winning_move_for(opp)
        if move is not None:
            logging.debug("%s: blocking at %s", self.name, move)
            return move

        forks = sorted(board.forking_moves_for(me))
        if forks:
            logging.debug("%s: making a fork at %s", self.name, forks[0])
            return forks[0]

        opp_forks = board.forking_moves_for(opp)
        if len(opp_forks) == 1:
            move = next(iter(opp_forks))
            logging.debug("%s: blocking forking move at %s", self.name, move)
            return move
        if len(opp_forks) > 1:
            move = self.forcing_move(board, opp_forks)
            if move is not None:
                logging.debug("%s: more than one forking move for opponent, forcing defense at %s", self.name, move)
                return move
            logging.debug("%s: no safe forcing move against %d forks", self.name, len(opp_forks))

        if board.is_empty(CENTER):
            logging.debug("%s: playing center", self.name)
            return CENTER

        for corner in CORNERS:
            if board.cell(corner) is opp and board.is_empty(_opposite_corner(corner)):
                logging.debug("%s: playing opposite corner %s", self.name, _opposite_corner(corner))
                return _opposite_corner(corner)

        move = board.corner_move(self.rng)
        if move is not None:
            logging.debug("%s: playing corner %s", self.name, move)
            return move
        move = board.edge_move(self.rng)
        if move is not None:
            logging.debug("%s: playing edge %s", self.name, move)
            return move
        raise MovePoolExhausted(f"{self.name} found no empty cell to play.")

    def forcing_move(self, board: Board, opp_forks) -> Optional[CellCoord]:
        """Make two in a row so the reply is forced, unless that reply hands
        the opponent two threats. Cells that also sit on an opponent fork are
        tried first."""
        candidates: List[CellCoord] = []
        for _, line in board.single_marker_sets_for(self.marker):
            for cell in line.cells:
                if board.is_empty(cell) and cell not in candidates:
                    candidates.append(cell)
        candidates.sort(key=lambda c: (c not in opp_forks, c))
        for cell in candidates:
            if self._reply_is_safe(board, cell):
                return cell
        return None

    def _reply_is_safe(self, board: Board, cell: CellCoord) -> bool:
        sim = board.copy()
        sim.place(cell, self.marker)
        for reply in sim.winning_moves_for(self.marker):
            after = sim.copy()
            after.place(reply, self.opponent)
            if len(after.winning_moves_for(self.opponent)) >= 2:
                return False
        return True


class PerfectPlayer(Player):
    """Picks uniformly among the moves the exact solver rates best."""
    kind = 'perfect'

    def get_move(self, board: Board) -> CellCoord:
        if board.side_to_move() is not self.marker:
            raise ValueError(f"It is not {self.marker.symbol}'s turn on {board.key()}")
        res = solve_state(board.key())
        moves = res['optimal_moves']
        if not moves:
            raise MovePoolExhausted(f"{self.name} found no move on a finished board.")
        idx = moves[int(self.rng.integers(len(moves)))]
        logging.debug("%s: value=%s plies=%s choices=%s", self.name, res['value'], res['plies_to_end'], list(moves))
        return CellCoord.from_index(idx)


PLAYER_KINDS: Dict[str, Type[Player]] = {
    cls.kind: cls
    for cls in (HumanPlayer, RandomPlayer, BasicPlayer, ForkingPlayer, OptimalPlayer, PerfectPlayer)
}


def make_player(kind: str, name: str, marker: Marker, seed: Optional[int] = None) -> Player:
    try:
        cls = PLAYER_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown player kind: {kind!r} (choose from {', '.join(PLAYER_KINDS)})") from None
    return cls(name, marker, seed=seed)
