from __future__ import annotations

import argparse
import logging
from typing import Optional

from .board import Board
from .cells import Marker
from .config import GameConfig
from .game import Game
from .players import PLAYER_KINDS, make_player
from .solver import is_plausible, solve_state


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tttboard", description="Tic-tac-toe board engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the players' random sources")

    kinds = sorted(PLAYER_KINDS)
    p_play = sub.add_parser("play", help="Play one game on the terminal")
    p_play.add_argument("--x", dest="x_kind", choices=kinds, default=None, help="Player kind for X (default: human)")
    p_play.add_argument("--o", dest="o_kind", choices=kinds, default=None, help="Player kind for O (default: optimal)")
    p_play.add_argument("--x-name", default=None, help="Display name for X")
    p_play.add_argument("--o-name", default=None, help="Display name for O")
    p_play.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds automated players wait before moving (default: $TTTBOARD_THINK_DELAY or 0)",
    )

    p_tac = sub.add_parser("tactics", help="Show winning moves, forks and move pools for a board")
    p_tac.add_argument("--board", required=True, help="Board string, e.g., XX__O____ (X, O, _ or .)")

    p_sol = sub.add_parser("solve", help="Solve a board via perfect play from side-to-move")
    p_sol.add_argument("--board", required=True, help="Board string, e.g., X___O____")

    return p


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _load_board(raw: str) -> Optional[Board]:
    try:
        board = Board.from_string(raw)
    except ValueError as e:
        logging.error("%s", e)
        return None
    if not is_plausible(board.key()):
        logging.error("Board is not a valid reachable state.")
        return None
    return board


def _fmt(cells) -> str:
    return "[" + ", ".join(str(c) for c in sorted(cells)) + "]"


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tttboard"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "play":
        try:
            cfg = GameConfig.from_env(
                x_kind=ns.x_kind,
                o_kind=ns.o_kind,
                x_name=ns.x_name,
                o_name=ns.o_name,
                seed=ns.seed,
                think_delay=ns.delay,
            )
        except ValueError as e:
            logging.error("%s", e)
            return 2
        if cfg.think_delay < 0:
            logging.error("Delay must be >= 0: %s", cfg.think_delay)
            return 2
        seed_x, seed_o = cfg.player_seeds()
        game = Game(
            make_player(cfg.x_kind, cfg.x_name, Marker.X, seed=seed_x),
            make_player(cfg.o_kind, cfg.o_name, Marker.O, seed=seed_o),
            board=Board(seed=cfg.seed),
            think_delay=cfg.think_delay,
        )
        if ns.verbose:
            logging.info("config=%s", cfg)
        try:
            game.play()
        except (EOFError, KeyboardInterrupt):
            logging.error("Game aborted.")
            return 1
        return 0

    if ns.cmd == "tactics":
        b = _load_board(ns.board)
        if b is None:
            return 2
        logging.info("to_move=%s", b.side_to_move().symbol)
        for m in Marker:
            logging.info(
                "%s wins=%s forks=%s singles=%s",
                m.symbol,
                _fmt(b.winning_moves_for(m)),
                _fmt(b.forking_moves_for(m)),
                [f"{c}@{line}" for c, line in b.single_marker_sets_for(m)],
            )
        logging.info(
            "corners=%s edges=%s",
            _fmt(b.available_corner_moves()),
            _fmt(b.available_edge_moves()),
        )
        return 0

    if ns.cmd == "solve":
        b = _load_board(ns.board)
        if b is None:
            return 2
        res = solve_state(b.key())
        logging.info(
            "value=%s plies=%s optimal=%s",
            res['value'],
            res['plies_to_end'],
            list(res['optimal_moves']),
        )
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
