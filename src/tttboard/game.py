"""
One game between two players: X moves first, turns alternate until a win or a tie.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .board import Board
from .cells import CellCoord, GameStatus, InvalidMoveError, Marker, MoveResult
from .players import Player


@dataclass
class GameResult:
    status: GameStatus
    winner: Optional[Player] = None
    moves: List[Tuple[Marker, CellCoord]] = field(default_factory=list)

    @property
    def is_tie(self) -> bool:
        return self.status is GameStatus.TIE


class Game:
    def __init__(
        self,
        player_x: Player,
        player_o: Player,
        board: Optional[Board] = None,
        display: Optional[Callable[[str], None]] = print,
        think_delay: float = 0.0,
    ):
        if player_x.marker is not Marker.X or player_o.marker is not Marker.O:
            raise ValueError("player_x must play X and player_o must play O")
        self.players = (player_x, player_o)
        self.board = board if board is not None else Board()
        self.display = display
        self.think_delay = think_delay

    def _show(self, text: str) -> None:
        if self.display is not None:
            self.display(text)

    def take_turn(self, player: Player) -> CellCoord:
        if self.think_delay > 0 and player.kind != 'human':
            time.sleep(self.think_delay)
        move = player.get_move(self.board)
        result = self.board.validate(move)
        if result is not MoveResult.VALID:
            # automated players validate their own choices; humans loop until valid
            raise InvalidMoveError(move, result)
        self.board.place(move, player.marker)
        logging.debug("%s (%s) -> %s", player.name, player.marker.symbol, move)
        return move

    def play(self) -> GameResult:
        moves: List[Tuple[Marker, CellCoord]] = []
        self._show("\n" + self.board.render() + "\n")
        turn = 0 if self.board.side_to_move() is Marker.X else 1
        while True:
            player = self.players[turn]
            move = self.take_turn(player)
            moves.append((player.marker, move))
            self._show("\n" + self.board.render() + "\n")
            status = self.board.evaluate_state(move, player.marker)
            if status is GameStatus.WIN:
                self._show(f"{player.name} won!")
                logging.info("%s (%s) won after %d markers", player.name, player.marker.symbol, self.board.marker_count)
                return GameResult(status, player, moves)
            if status is GameStatus.TIE:
                self._show("The game was a tie!")
                logging.info("tie after %d markers", self.board.marker_count)
                return GameResult(status, None, moves)
            turn = 1 - turn
