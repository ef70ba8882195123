import pytest

from tttboard.board import Board
from tttboard.cells import (
    CORNERS,
    EDGES,
    CellCoord,
    GameStatus,
    InvalidMoveError,
    Marker,
    MoveResult,
)
from tttboard.tactics import derive_metadata

X, O = Marker.X, Marker.O


def _play(board: Board, moves):
    for marker, (r, c) in moves:
        board.place(CellCoord(r, c), marker)
    return board


def test_new_board_is_empty():
    b = Board()
    assert b.marker_count == 0
    assert b.display_state() == [['_'] * 3 for _ in range(3)]
    assert b.winning_move_for(X) is None
    assert b.forking_moves_for(O) == set()
    assert b.single_marker_sets_for(X) == []
    assert len(b.empty_cells()) == 9


def test_two_in_a_row_gives_winning_move():
    b = _play(Board(), [(X, (0, 0)), (X, (0, 1))])
    assert b.winning_move_for(X) == CellCoord(0, 2)
    assert b.winning_move_for(O) is None


def test_three_in_a_row_wins():
    b = _play(Board(), [(X, (0, 0)), (X, (0, 1)), (X, (0, 2))])
    assert b.evaluate_state(CellCoord(0, 2), X) is GameStatus.WIN


def test_full_board_scenario_evaluates_tie_on_last_move_lines():
    b = Board()
    for rc in [(0, 0), (0, 1), (1, 2), (1, 0), (2, 1)]:
        b.place(CellCoord(*rc), X)
    for rc in [(0, 2), (1, 1), (2, 0), (2, 2)]:
        b.place(CellCoord(*rc), O)
    assert b.marker_count == 9
    # only the lines through (2, 2) are inspected
    assert b.evaluate_state(CellCoord(2, 2), O) is GameStatus.TIE


def test_real_tie_game():
    order = [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0), (2, 2)]
    b = Board()
    marker = X
    for i, rc in enumerate(order):
        coord = CellCoord(*rc)
        b.place(coord, marker)
        status = b.evaluate_state(coord, marker)
        if i < 8:
            assert status is GameStatus.PLAYING
        marker = marker.opposite()
    assert status is GameStatus.TIE
    assert b.render() == "X O X\nX O O\nO X X"


def test_win_on_ninth_move_is_win_not_tie():
    b = Board.from_string("XOX" "OXO" "OX_")
    b.place(CellCoord(2, 2), X)
    assert b.evaluate_state(CellCoord(2, 2), X) is GameStatus.WIN


def test_evaluate_state_only_reads_lines_through_last_move():
    # X owns row 0, but the last move (2, 1) is not on it
    b = Board.from_string("XXX" "OO_" "___")
    b.place(CellCoord(2, 1), O)
    assert b.evaluate_state(CellCoord(2, 1), O) is GameStatus.PLAYING
    assert b.evaluate_state(CellCoord(0, 1), X) is GameStatus.WIN
    # never flags a line owned by the other marker
    assert b.evaluate_state(CellCoord(0, 1), O) is GameStatus.PLAYING


def test_forks_from_opposite_corners():
    b = _play(Board(), [(X, (0, 0)), (X, (2, 2))])
    assert b.forking_moves_for(X) == {CellCoord(0, 2), CellCoord(2, 0)}
    assert b.winning_move_for(X) == CellCoord(1, 1)


def test_validate():
    b = _play(Board(), [(X, (0, 0))])
    assert b.validate(CellCoord(0, 0)) is MoveResult.ALREADY_OCCUPIED
    assert b.validate(CellCoord(3, 0)) is MoveResult.OUT_OF_BOUNDS
    assert b.validate(CellCoord(0, 3)) is MoveResult.OUT_OF_BOUNDS
    assert b.validate(CellCoord(-1, 0)) is MoveResult.OUT_OF_BOUNDS
    assert b.validate(CellCoord(1, 1)) is MoveResult.VALID


def test_place_never_overwrites():
    b = _play(Board(), [(X, (0, 0))])
    with pytest.raises(InvalidMoveError) as exc:
        b.place(CellCoord(0, 0), O)
    assert exc.value.result is MoveResult.ALREADY_OCCUPIED
    assert b.cell(CellCoord(0, 0)) is X
    assert b.marker_count == 1
    with pytest.raises(InvalidMoveError):
        b.place(CellCoord(3, 3), O)
    assert b.marker_count == 1


def test_corner_pool_exhausts():
    b = Board(seed=0)
    for i, corner in enumerate(reversed(CORNERS)):
        assert len(b.available_corner_moves()) == 4 - i
        b.place(corner, X if i % 2 else O)
        assert len(b.available_corner_moves()) == 3 - i
    assert b.corner_move() is None
    assert len(b.available_edge_moves()) == 4
    assert b.edge_move() in EDGES


def test_pool_moves_are_unclaimed():
    b = Board(seed=7)
    b.place(CellCoord(0, 0), X)
    b.place(CellCoord(0, 1), O)
    for _ in range(20):
        assert b.is_empty(b.corner_move())
        assert b.is_empty(b.edge_move())
    b.place(CellCoord(1, 1), X)
    assert len(b.available_corner_moves()) == 3
    assert len(b.available_edge_moves()) == 3


def test_blocking_removes_winning_move():
    b = _play(Board(), [(X, (0, 0)), (X, (0, 1))])
    assert CellCoord(0, 2) in b.winning_moves_for(X)
    b.place(CellCoord(0, 2), O)
    assert b.winning_moves_for(X) == set()
    assert b.winning_move_for(X) is None


def test_blocked_line_drops_fork_candidate():
    b = _play(Board(), [(X, (0, 0))])
    lines = {str(line) for _, line in b.single_marker_sets_for(X)}
    assert lines == {"row 0", "column 0", "diagonal"}
    b.place(CellCoord(1, 1), O)
    lines = {str(line) for _, line in b.single_marker_sets_for(X)}
    assert lines == {"row 0", "column 0"}


def test_cell_symbol_and_key():
    b = _play(Board(), [(X, (0, 0)), (O, (1, 1))])
    assert b.cell_symbol(0) == 'X'
    assert b.cell_symbol(4) == 'O'
    assert b.cell_symbol(8) == '_'
    assert b.key() == "X___O____"
    assert repr(b) == "Board('X___O____')"


@pytest.mark.parametrize("bad", ["", "XO", "XOXOXOXOXO", "XO_XO_XO?", "123456789"])
def test_from_string_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        Board.from_string(bad)


def test_from_string_accepts_separators():
    b = Board.from_string("xo_/.x./__o")
    assert b.key() == "XO__X___O"
    assert b.marker_count == 4
    assert b.side_to_move() is X


def test_copy_is_independent():
    b = _play(Board(), [(X, (0, 0)), (X, (0, 1))])
    c = b.copy()
    c.place(CellCoord(0, 2), O)
    assert b.is_empty(CellCoord(0, 2))
    assert b.winning_move_for(X) == CellCoord(0, 2)
    assert c.winning_move_for(X) is None
    assert len(b.available_corner_moves()) == 3
    assert len(c.available_corner_moves()) == 2


def test_metadata_matches_rescan_after_each_move():
    b = Board()
    order = [(X, (1, 1)), (O, (0, 0)), (X, (2, 2)), (O, (0, 2)), (X, (0, 1)), (O, (2, 1))]
    for marker, rc in order:
        b.place(CellCoord(*rc), marker)
        assert b.metadata() == derive_metadata(b.cells)
