"""Core domain layer — the chess rules, with zero external dependencies.

Quick start::

    from chessframe.core import Position, move_from_uci

    pos = Position.initial()
    pos.perform(move_from_uci("e2e4", pos))
    print(pos.to_fen())
"""

from chessframe.core.enums import (
    CastlingRights,
    CheckStatus,
    Color,
    GameResult,
    PieceType,
    SurfaceAction,
)
from chessframe.core.errors import (
    AmbiguousSanError,
    ChessError,
    IllegalMoveError,
    InvalidNotationError,
    NoSuchPieceError,
    OracleError,
)
from chessframe.core.piece import Piece
from chessframe.core.types import Square, all_squares, in_bounds, parse_square
from chessframe.core.move import (
    CastleMove,
    CheckedMove,
    Move,
    NormalMove,
    PromotionMove,
)
from chessframe.core.notation import (
    STARTING_FEN,
    move_from_san,
    move_from_uci,
    position_from_fen,
    position_to_fen,
)
from chessframe.core.position import Position

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CheckStatus",
    "Color",
    "GameResult",
    "PieceType",
    "SurfaceAction",
    # Errors
    "AmbiguousSanError",
    "ChessError",
    "IllegalMoveError",
    "InvalidNotationError",
    "NoSuchPieceError",
    "OracleError",
    # Types / helpers
    "Square",
    "all_squares",
    "in_bounds",
    "parse_square",
    # Domain objects
    "Piece",
    "Position",
    "Move",
    "NormalMove",
    "PromotionMove",
    "CastleMove",
    "CheckedMove",
    # Notation
    "STARTING_FEN",
    "move_from_san",
    "move_from_uci",
    "position_from_fen",
    "position_to_fen",
]
