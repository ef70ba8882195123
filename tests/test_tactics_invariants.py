import pytest

from tttboard.board import Board
from tttboard.cells import CellCoord, GameStatus, Marker
from tttboard.lines import lines_through
from tttboard.solver import iter_reachable
from tttboard.tactics import derive_metadata, fork_moves, immediate_winning_moves, tally_line


@pytest.fixture(scope="module")
def reachable_boards():
    return [Board.from_string(k) for k in iter_reachable()]


def test_reachable_count(reachable_boards):
    assert len(reachable_boards) == 5478


def test_cache_equals_full_rescan(reachable_boards):
    for b in reachable_boards:
        assert b.metadata() == derive_metadata(b.cells), b.key()


def _completes_line(b: Board, c: CellCoord, m: Marker) -> bool:
    sim = b.copy()
    sim.place(c, m)
    return sim.evaluate_state(c, m) is GameStatus.WIN


def _new_threats(b: Board, c: CellCoord, m: Marker) -> int:
    """Lines through c that would hold two m and one empty after m plays c."""
    n = 0
    for line in lines_through(c):
        t = tally_line(b.cells, line)
        if t.owner is m and len(t.occupied_by(m)) == 1 and len(t.empty_cells) == 2:
            n += 1
    return n


@pytest.mark.parametrize("m", list(Marker))
def test_winning_moves_match_brute_force(reachable_boards, m):
    for b in reachable_boards:
        expected = {c for c in b.empty_cells() if _completes_line(b, c, m)}
        assert b.winning_moves_for(m) == expected, b.key()
        one = b.winning_move_for(m)
        assert (one is None) == (not expected)
        if one is not None:
            assert one in expected


@pytest.mark.parametrize("m", list(Marker))
def test_forking_moves_match_brute_force(reachable_boards, m):
    for b in reachable_boards:
        expected = {c for c in b.empty_cells() if _new_threats(b, c, m) >= 2}
        forks = b.forking_moves_for(m)
        assert forks == expected, b.key()
        assert all(b.is_empty(c) for c in forks)


def test_single_marker_sets_are_one_marker_two_empties(reachable_boards):
    for b in reachable_boards:
        for m in Marker:
            for coord, line in b.single_marker_sets_for(m):
                assert b.cell(coord) is m
                t = tally_line(b.cells, line)
                assert t.occupied_by(m) == (coord,)
                assert len(t.empty_cells) == 2
                assert not t.occupied_by(m.opposite())


def test_mixed_lines_contribute_nothing():
    b = Board.from_string("XO_" "___" "___")
    assert b.winning_moves_for(Marker.X) == set()
    assert all(str(line) != "row 0" for _, line in b.single_marker_sets_for(Marker.X))
    assert all(str(line) != "row 0" for _, line in b.single_marker_sets_for(Marker.O))


def test_pure_helpers_agree_with_board():
    b = Board.from_string("X_X" "_O_" "O__")
    assert immediate_winning_moves(b.cells, Marker.X) == [CellCoord(0, 1)]
    assert fork_moves(b.cells, Marker.X) == b.forking_moves_for(Marker.X)
