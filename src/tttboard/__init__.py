"""tttboard package.

Tic-tac-toe board state engine with incrementally maintained tactics,
move-selection policies, a game loop and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Board
from .cells import CellClass, CellCoord, GameStatus, InvalidMoveError, Marker, MoveResult
from .game import Game, GameResult
from .players import make_player
from .tactics import derive_metadata

__all__ = [
    "Board",
    "CellClass",
    "CellCoord",
    "GameStatus",
    "InvalidMoveError",
    "Marker",
    "MoveResult",
    "Game",
    "GameResult",
    "make_player",
    "derive_metadata",
]
