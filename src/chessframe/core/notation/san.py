"""SAN (Standard Algebraic Notation) → :class:`Move`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessframe.core.enums import CheckStatus, PieceType
from chessframe.core.errors import AmbiguousSanError, InvalidNotationError
from chessframe.core.move import CastleMove, Move, NormalMove, PromotionMove
from chessframe.core.piece import Piece
from chessframe.core.types import Square

if TYPE_CHECKING:
    from chessframe.core.position import Position

_FILES = "abcdefgh"
_RANKS = "12345678"
_PIECE_LETTERS = "KQRBNP"


def _split_check(san: str) -> tuple[str, CheckStatus | None]:
    status = CheckStatus.from_suffix(san[-1:])
    if status is None:
        return san, None
    return san[:-1], status


def move_from_san(san: str, position: Position) -> Move:
    """Parse *san* in the context of *position* (its side to move and board)."""
    text = san.strip()
    if not text:
        raise InvalidNotationError("Empty SAN")
    color = position.active_color

    text, status = _split_check(text)

    move: Move
    if text in ("O-O", "0-0"):
        move = CastleMove(color, queenside=False)
    elif text in ("O-O-O", "0-0-0"):
        move = CastleMove(color, queenside=True)
    else:
        move = _parse_piece_move(text, position, san)

    if status is not None:
        return move.with_check(status)
    return move


def _parse_piece_move(text: str, position: Position, san: str) -> Move:
    # Promotion suffix
    promoted_to: PieceType | None = None
    if len(text) >= 2 and text[-2] == "=":
        promoted_to = PieceType.from_letter(text[-1])
        text = text[:-2]

    # Destination
    if len(text) < 2:
        raise InvalidNotationError(f"Invalid SAN: {san!r}")
    to_sq = Square.parse(text[-2:])
    text = text[:-2]

    # Capture marker
    capture = text.endswith("x")
    if capture:
        text = text[:-1]

    # Piece letter (a bare pawn has none)
    piece_type = PieceType.PAWN
    if text and text[0] in _PIECE_LETTERS:
        piece_type = PieceType.from_letter(text[0])
        text = text[1:]

    from_sq = _resolve_origin(text, piece_type, to_sq, position, san)

    if promoted_to is not None:
        return PromotionMove(from_sq, to_sq, capture, promoted_to)
    return NormalMove(piece_type, from_sq, to_sq, capture)


def _resolve_origin(
    disambiguator: str,
    piece_type: PieceType,
    to_sq: Square,
    position: Position,
    san: str,
) -> Square:
    from_file: int | None = None
    from_rank: int | None = None
    if len(disambiguator) == 2:
        origin = Square.parse(disambiguator)
        from_file, from_rank = origin.file, origin.rank
    elif len(disambiguator) == 1:
        if disambiguator in _FILES:
            from_file = _FILES.index(disambiguator)
        elif disambiguator in _RANKS:
            from_rank = _RANKS.index(disambiguator)
        else:
            raise InvalidNotationError(f"Invalid SAN disambiguator: {san!r}")
    elif disambiguator:
        raise InvalidNotationError(f"Invalid SAN: {san!r}")

    wanted = Piece(position.active_color, piece_type)
    for sq, piece in position.occupied(position.active_color):
        if piece != wanted:
            continue
        if from_file is not None and sq.file != from_file:
            continue
        if from_rank is not None and sq.rank != from_rank:
            continue
        if position.is_move_possible(sq, to_sq):
            return sq
    raise AmbiguousSanError(f"No valid piece for {san!r}")
