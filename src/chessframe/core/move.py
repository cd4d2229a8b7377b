"""Move value objects.

A move is one of a closed set of immutable variants:

* :class:`NormalMove`: any piece moving from one square to another,
* :class:`PromotionMove`: a pawn reaching its last rank,
* :class:`CastleMove`: king and rook swapping sides,
* :class:`CheckedMove`: any of the above annotated with ``+`` or ``#``.

Each variant knows how to render itself as UCI LAN and SAN, how to check
itself against a :class:`~chessframe.core.position.Position` and how to
apply its piece motion to one.  Counters, rights and the side to move are
the position's business (see ``Position.perform``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessframe.core.enums import CheckStatus, Color, PieceType
from chessframe.core.piece import Piece
from chessframe.core.types import Square

if TYPE_CHECKING:
    from chessframe.core.position import Position

_CASTLE_UCI: dict[tuple[Color, bool], str] = {
    (Color.WHITE, False): "e1g1",
    (Color.WHITE, True): "e1c1",
    (Color.BLACK, False): "e8g8",
    (Color.BLACK, True): "e8c8",
}


class Move(ABC):
    """Common behaviour of every move variant."""

    __slots__ = ()

    @abstractmethod
    def is_pawn_move_or_capture(self) -> bool:
        """Whether this move resets the halfmove clock."""

    @abstractmethod
    def en_passant_square(self) -> Square | None:
        """Square jumped over by a pawn double step, if any."""

    @abstractmethod
    def is_possible_on(self, position: Position) -> bool:
        """Pseudo-legality of this move on *position*."""

    @abstractmethod
    def play(self, position: Position) -> None:
        """Apply the piece motion of this move to *position*."""

    @abstractmethod
    def to_uci(self) -> str: ...

    @abstractmethod
    def to_san(self) -> str: ...

    def with_check(self, status: CheckStatus) -> CheckedMove:
        return CheckedMove(self, status)

    def unwrap(self) -> Move:
        """The move without any check annotation."""
        return self

    def __str__(self) -> str:
        return self.to_san()

    # ── Factories ────────────────────────────────────────────────────────

    @staticmethod
    def normal(
        piece_type: PieceType, from_sq: Square, to_sq: Square, capture: bool = False
    ) -> NormalMove:
        return NormalMove(piece_type, from_sq, to_sq, capture)

    @staticmethod
    def promotion(
        from_sq: Square, to_sq: Square, promoted_to: PieceType, capture: bool = False
    ) -> PromotionMove:
        return PromotionMove(from_sq, to_sq, capture, promoted_to)

    @staticmethod
    def short_castle(color: Color) -> CastleMove:
        return CastleMove(color, queenside=False)

    @staticmethod
    def long_castle(color: Color) -> CastleMove:
        return CastleMove(color, queenside=True)


@dataclass(frozen=True, slots=True)
class NormalMove(Move):
    """A piece moving from one square to another (captures included)."""

    piece_type: PieceType
    from_sq: Square
    to_sq: Square
    capture: bool = False

    def is_pawn_move_or_capture(self) -> bool:
        return self.capture or self.piece_type == PieceType.PAWN

    def en_passant_square(self) -> Square | None:
        if self.piece_type == PieceType.PAWN and abs(self.to_sq.rank - self.from_sq.rank) == 2:
            return Square(self.to_sq.file, (self.from_sq.rank + self.to_sq.rank) // 2)
        return None

    def is_possible_on(self, position: Position) -> bool:
        return position.is_move_possible(self.from_sq, self.to_sq)

    def play(self, position: Position) -> None:
        destination_was_empty = position.get(self.to_sq) is None
        position.move_raw(self.from_sq, self.to_sq)
        if self.piece_type == PieceType.PAWN and self.capture and destination_was_empty:
            # En passant: the captured pawn sits beside the origin square.
            position.set(Square(self.to_sq.file, self.from_sq.rank), None)

    def to_uci(self) -> str:
        return f"{self.from_sq}{self.to_sq}"

    def to_san(self) -> str:
        san = "" if self.piece_type == PieceType.PAWN else self.piece_type.letter
        san += str(self.from_sq)
        if self.capture:
            san += "x"
        return san + str(self.to_sq)


@dataclass(frozen=True, slots=True)
class PromotionMove(Move):
    """A pawn move onto its last rank, replaced by *promoted_to*."""

    from_sq: Square
    to_sq: Square
    capture: bool
    promoted_to: PieceType

    @property
    def piece_type(self) -> PieceType:
        return PieceType.PAWN

    def _as_normal(self) -> NormalMove:
        return NormalMove(PieceType.PAWN, self.from_sq, self.to_sq, self.capture)

    def is_pawn_move_or_capture(self) -> bool:
        return True

    def en_passant_square(self) -> Square | None:
        return None

    def is_possible_on(self, position: Position) -> bool:
        piece = position.get(self.from_sq)
        if piece is None or piece.piece_type != PieceType.PAWN:
            return False
        if self.to_sq.rank != piece.color.promotion_rank:
            return False
        return position.is_move_possible(self.from_sq, self.to_sq)

    def play(self, position: Position) -> None:
        self._as_normal().play(position)
        moved = position.get(self.to_sq)
        if moved is not None:
            position.set(self.to_sq, Piece(moved.color, self.promoted_to))

    def to_uci(self) -> str:
        return self._as_normal().to_uci() + self.promoted_to.letter.lower()

    def to_san(self) -> str:
        # The pawn letter stays explicit so the long form reads unambiguously.
        return f"{PieceType.PAWN.letter}{self._as_normal().to_san()}={self.promoted_to.letter}"


@dataclass(frozen=True, slots=True)
class CastleMove(Move):
    """King and rook castling on the given wing."""

    color: Color
    queenside: bool = False

    @property
    def king_square(self) -> Square:
        return Square(4, self.color.back_rank)

    @property
    def rook_square(self) -> Square:
        return Square(0 if self.queenside else 7, self.color.back_rank)

    @property
    def direction(self) -> int:
        return -1 if self.queenside else 1

    def is_pawn_move_or_capture(self) -> bool:
        return False

    def en_passant_square(self) -> Square | None:
        return None

    def is_possible_on(self, position: Position) -> bool:
        # The king's path is not tested for attacks.
        if not position.can_castle(self.color, self.queenside):
            return False
        king_sq = self.king_square
        rook_sq = self.rook_square
        return (
            position.is_piece_at(king_sq, Piece(self.color, PieceType.KING))
            and position.is_piece_at(rook_sq, Piece(self.color, PieceType.ROOK))
            and position.is_rank_open(self.color.back_rank, rook_sq.file, king_sq.file)
        )

    def play(self, position: Position) -> None:
        king_sq = self.king_square
        position.move_raw(king_sq, king_sq.relative(2 * self.direction, 0))
        position.move_raw(self.rook_square, king_sq.relative(self.direction, 0))

    def to_uci(self) -> str:
        return _CASTLE_UCI[(self.color, self.queenside)]

    def to_san(self) -> str:
        return "O-O-O" if self.queenside else "O-O"


@dataclass(frozen=True, slots=True)
class CheckedMove(Move):
    """Wraps a move with a check annotation; only SAN is affected."""

    move: Move
    status: CheckStatus

    def with_check(self, status: CheckStatus) -> CheckedMove:
        return CheckedMove(self.move, status)

    def unwrap(self) -> Move:
        return self.move.unwrap()

    def is_pawn_move_or_capture(self) -> bool:
        return self.move.is_pawn_move_or_capture()

    def en_passant_square(self) -> Square | None:
        return self.move.en_passant_square()

    def is_possible_on(self, position: Position) -> bool:
        return self.move.is_possible_on(position)

    def play(self, position: Position) -> None:
        self.move.play(position)

    def to_uci(self) -> str:
        return self.move.to_uci()

    def to_san(self) -> str:
        return self.move.to_san() + self.status.suffix
