"""
Exact game-theoretic solver (minimax with memoization), from the side-to-move perspective.
Positions are 9-character keys of X, O and _ (see `Board.key`).
Tie-break policy:
- Prefer win over draw over loss.
- Among wins/draws, prefer shorter distance (plies) to termination.
- Among losses, prefer longer distance (delay the loss).
"""
from collections import deque
from functools import lru_cache
from typing import Dict, Iterator, List, Optional

from .cells import EMPTY_SYMBOL
from .lines import LINES

_LINE_INDICES = [tuple(c.flat_index for c in line.cells) for line in LINES]


def legal_moves(key: str) -> List[int]:
    return [i for i, v in enumerate(key) if v == EMPTY_SYMBOL]


def current_player(key: str) -> str:
    return 'X' if key.count('X') == key.count('O') else 'O'


def apply_move(key: str, idx: int, symbol: str) -> str:
    return key[:idx] + symbol + key[idx + 1:]


def winner(key: str) -> Optional[str]:
    for a, b, c in _LINE_INDICES:
        v = key[a]
        if v != EMPTY_SYMBOL and v == key[b] and v == key[c]:
            return v
    return None


def is_terminal(key: str) -> bool:
    return winner(key) is not None or EMPTY_SYMBOL not in key


def is_plausible(key: str) -> bool:
    """Marker counts consistent with X moving first and at most one winner."""
    x, o = key.count('X'), key.count('O')
    if not (x == o or x == o + 1):
        return False
    wins = {key[a] for a, b, c in _LINE_INDICES if key[a] != EMPTY_SYMBOL and key[a] == key[b] == key[c]}
    if len(wins) > 1:
        return False
    if 'X' in wins and x != o + 1:
        return False
    if 'O' in wins and x != o:
        return False
    return True


def better_of(a: int, b: int) -> int:
    order = {+1: 2, 0: 1, -1: 0}
    return a if order[a] > order[b] else b


@lru_cache(maxsize=None)
def solve_state(key: str) -> Dict:
    if winner(key) is not None:
        # the side to move did not make the last move, so it lost
        return {
            'value': -1,
            'plies_to_end': 0,
            'optimal_moves': tuple(),
            'q_values': tuple([None] * 9),
        }
    if EMPTY_SYMBOL not in key:
        return {
            'value': 0,
            'plies_to_end': 0,
            'optimal_moves': tuple(),
            'q_values': tuple([None] * 9),
        }
    p = current_player(key)
    q_vals: List[Optional[int]] = [None] * 9
    dtt: List[Optional[int]] = [None] * 9
    best_val: Optional[int] = None
    best_dtt: Optional[int] = None
    best_moves: List[int] = []
    for mv in legal_moves(key):
        child = solve_state(apply_move(key, mv, p))
        q = -child['value']
        q_vals[mv] = q
        dtt[mv] = 1 + child['plies_to_end']
        if best_val is None or (better_of(q, best_val) == q and q != best_val):
            best_val = q
            best_dtt = dtt[mv]
            best_moves = [mv]
        elif q == best_val:
            longer_is_better = q == -1
            if (dtt[mv] > best_dtt) if longer_is_better else (dtt[mv] < best_dtt):
                best_dtt = dtt[mv]
                best_moves = [mv]
            elif dtt[mv] == best_dtt:
                best_moves.append(mv)
    return {
        'value': best_val,
        'plies_to_end': best_dtt,
        'optimal_moves': tuple(sorted(best_moves)),
        'q_values': tuple(q_vals),
    }


def iter_reachable() -> Iterator[str]:
    """Breadth-first over every position reachable from the empty board."""
    start = EMPTY_SYMBOL * 9
    q = deque([start])
    seen = {start}
    while q:
        s = q.popleft()
        yield s
        if is_terminal(s):
            continue
        p = current_player(s)
        for mv in legal_moves(s):
            child = apply_move(s, mv, p)
            if child not in seen:
                seen.add(child)
                q.append(child)
