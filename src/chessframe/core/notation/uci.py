"""UCI long-algebraic notation (LAN) → :class:`Move`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessframe.core.enums import Color, PieceType
from chessframe.core.errors import InvalidNotationError, NoSuchPieceError
from chessframe.core.move import CastleMove, Move, NormalMove, PromotionMove
from chessframe.core.types import Square

if TYPE_CHECKING:
    from chessframe.core.position import Position

_CASTLE_STRINGS: dict[str, CastleMove] = {
    "e1g1": CastleMove(Color.WHITE, queenside=False),
    "e1c1": CastleMove(Color.WHITE, queenside=True),
    "e8g8": CastleMove(Color.BLACK, queenside=False),
    "e8c8": CastleMove(Color.BLACK, queenside=True),
}
_PROMOTION_LETTERS = "kqrbnp"


def move_from_uci(uci: str, position: Position, *, castle_shortcut: bool = True) -> Move:
    """Parse *uci* (e.g. ``e2e4``, ``e7e8q``) against *position*.

    The four king castling strings decode straight to :class:`CastleMove`
    whatever stands on the origin square.  Callers that cannot vouch for a
    king there pass ``castle_shortcut=False``; a king stepping two files
    from its home square is then still read as a castle.
    """
    if len(uci) not in (4, 5):
        raise InvalidNotationError(f"Invalid UCI move length: {uci!r}")

    if castle_shortcut and uci in _CASTLE_STRINGS:
        return _CASTLE_STRINGS[uci]

    from_sq = Square.parse(uci[0:2])
    to_sq = Square.parse(uci[2:4])
    piece = position.get(from_sq)
    if piece is None:
        raise NoSuchPieceError(f"No piece on {from_sq} for move {uci!r}")

    if (
        not castle_shortcut
        and len(uci) == 4
        and piece.piece_type == PieceType.KING
        and from_sq == Square(4, piece.color.back_rank)
        and to_sq.rank == from_sq.rank
        and abs(to_sq.file - from_sq.file) == 2
    ):
        return CastleMove(piece.color, queenside=to_sq.file < from_sq.file)

    capture = position.get(to_sq) is not None or (
        piece.piece_type == PieceType.PAWN and from_sq.file != to_sq.file
    )

    if len(uci) == 5:
        letter = uci[4]
        if letter not in _PROMOTION_LETTERS:
            raise InvalidNotationError(f"Invalid promotion piece: {letter!r}")
        return PromotionMove(from_sq, to_sq, capture, PieceType.from_letter(letter))
    return NormalMove(piece.piece_type, from_sq, to_sq, capture)
