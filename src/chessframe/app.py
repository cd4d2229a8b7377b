"""Application entry point: play an engine against itself and print the PGN."""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import Future

from chessframe.config import CoreConfig, load_config
from chessframe.core.errors import ChessError
from chessframe.core.notation.fen import STARTING_FEN

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_PLIES = 400


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessframe",
        description="Play a UCI engine against itself and print the game as PGN.",
    )
    parser.add_argument("--config", help="INI file with engine, site and piece settings")
    parser.add_argument("--engine", help="engine command (overrides the config)")
    parser.add_argument("--fen", default=STARTING_FEN, help="starting position")
    limit = parser.add_mutually_exclusive_group()
    limit.add_argument("--depth", type=int, help="search depth per move")
    limit.add_argument("--movetime", type=int, help="search time per move in ms")
    parser.add_argument(
        "--max-plies",
        type=int,
        default=DEFAULT_MAX_PLIES,
        help="stop after this many moves (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run_match(args: argparse.Namespace, config: CoreConfig) -> int:
    """Run the engine match inside a Qt event loop; returns the exit code."""
    from PyQt6.QtCore import QCoreApplication, QTimer

    from chessframe.core.enums import Color
    from chessframe.engine.qt_bridge import MainThreadPoster
    from chessframe.engine.uci_engine import UciEngine
    from chessframe.game.game import Game
    from chessframe.game.loop import PlayLoop
    from chessframe.game.player import EnginePlayer

    command = args.engine or config.engine_command
    if not command:
        _LOGGER.error("No engine configured; pass --engine or set engine/command")
        return 2

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    players: list[EnginePlayer] = []
    try:
        game = Game.from_fen(args.fen, config=config)
        for color in Color:
            engine = UciEngine(command, config.engine_default_timeout_ms)
            player = EnginePlayer(engine, name=engine.name or str(color))
            if args.depth is not None:
                player.depth = args.depth
            elif args.movetime is not None:
                player.move_time_ms = args.movetime
            players.append(player)
            game.set_player(color, player)

        poster = MainThreadPoster()
        loop = PlayLoop(game, poster, max_plies=args.max_plies)
        exit_code = 0

        def finished(done: Future[int]) -> None:
            nonlocal exit_code
            exc = done.exception()
            if exc is not None:
                _LOGGER.error("Match stopped: %s", exc)
                exit_code = 1
            app.quit()

        loop.done.add_done_callback(finished)
        QTimer.singleShot(0, loop.start)
        app.exec()
    except ChessError as exc:
        _LOGGER.error("%s", exc)
        return 1
    finally:
        for player in players:
            player.close()

    print(game.to_pgn())
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Launch the chessframe command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config) if args.config else CoreConfig()
    return run_match(args, config)


if __name__ == "__main__":
    sys.exit(main())
