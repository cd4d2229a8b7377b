"""Notation package: FEN, UCI LAN, SAN and PGN."""

from chessframe.core.notation.fen import (
    STARTING_FEN,
    FenRecord,
    parse_fen,
    position_from_fen,
    position_to_fen,
)
from chessframe.core.notation.pgn import (
    PGN_RESULT_TOKENS,
    build_pgn,
    game_result_from_pgn,
    pgn_movetext,
    pgn_result_token,
)
from chessframe.core.notation.san import move_from_san
from chessframe.core.notation.uci import move_from_uci

__all__ = [
    "STARTING_FEN",
    "FenRecord",
    "PGN_RESULT_TOKENS",
    "parse_fen",
    "position_from_fen",
    "position_to_fen",
    "move_from_san",
    "move_from_uci",
    "pgn_result_token",
    "game_result_from_pgn",
    "pgn_movetext",
    "build_pgn",
]
