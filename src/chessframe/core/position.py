"""Position — board occupancy plus game-state flags, and the rules oracle."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from chessframe.core.enums import CastlingRights, Color, PieceType
from chessframe.core.notation.fen import (
    STARTING_FEN,
    parse_fen,
    position_to_fen,
)
from chessframe.core.piece import Piece
from chessframe.core.types import Square, all_squares, in_bounds

if TYPE_CHECKING:
    from chessframe.core.move import Move

_LOGGER = logging.getLogger(__name__)


def _index(sq: Square) -> int:
    if not in_bounds(sq.file):
        raise IndexError("File must be between 0 and 7")
    if not in_bounds(sq.rank):
        raise IndexError("Rank must be between 0 and 7")
    return sq.rank * 8 + sq.file


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    The board is only ever changed through :meth:`set`, :meth:`move_raw`
    and :meth:`perform`; moves describe their own effect through
    ``Move.play``.  ``site`` is carried for PGN export and does not take
    part in equality.
    """

    __slots__ = (
        "_squares",
        "active_color",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "site",
    )

    def __init__(
        self,
        active_color: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        site: str = "",
    ) -> None:
        self._squares: list[Piece | None] = [None] * 64
        self.active_color = active_color
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.site = site

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def initial(cls, site: str = "") -> Position:
        """Standard starting position."""
        return cls.from_fen(STARTING_FEN, site=site)

    @classmethod
    def from_fen(cls, fen: str, site: str = "") -> Position:
        position = cls(site=site)
        position.load_fen(fen)
        return position

    # ── Element access ───────────────────────────────────────────────────

    def get(self, sq: Square) -> Piece | None:
        return self._squares[_index(sq)]

    def set(self, sq: Square, piece: Piece | None) -> bool:
        """Raw write that bypasses every rule."""
        self._squares[_index(sq)] = piece
        return True

    __getitem__ = get

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self.set(sq, piece)

    def is_piece_at(self, sq: Square, piece: Piece) -> bool:
        return self.get(sq) == piece

    def move_raw(self, from_sq: Square, to_sq: Square) -> bool:
        """Move whatever stands on *from_sq* to *to_sq*, dropping its contents."""
        piece = self.get(from_sq)
        if piece is None:
            return False
        self.set(from_sq, None)
        self.set(to_sq, piece)
        return True

    def find(self, piece: Piece) -> Square | None:
        """First square holding *piece*, in file-major order."""
        for sq in all_squares():
            if self.get(sq) == piece:
                return sq
        return None

    def occupied(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares (optionally of one *color*) in file-major order."""
        for sq in all_squares():
            piece = self.get(sq)
            if piece is not None and (color is None or piece.color == color):
                yield sq, piece

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def can_castle(self, color: Color, queenside: bool) -> bool:
        return bool(self.castling & CastlingRights.for_side(color, queenside))

    def set_castling(self, color: Color, queenside: bool, allowed: bool) -> None:
        right = CastlingRights.for_side(color, queenside)
        if allowed:
            self.castling |= right
        else:
            self.castling &= ~right

    def validate_castling(self) -> None:
        """Clear every right whose king or rook has left its home square."""
        for color in Color:
            if not self.castling & CastlingRights.both(color):
                continue
            back_rank = color.back_rank
            if not self.is_piece_at(Square(4, back_rank), Piece(color, PieceType.KING)):
                self.castling &= ~CastlingRights.both(color)
                continue
            rook = Piece(color, PieceType.ROOK)
            if self.can_castle(color, False) and not self.is_piece_at(
                Square(7, back_rank), rook
            ):
                self.set_castling(color, False, False)
            if self.can_castle(color, True) and not self.is_piece_at(
                Square(0, back_rank), rook
            ):
                self.set_castling(color, True, False)

    # ── En passant bookkeeping ───────────────────────────────────────────

    def _is_en_passant_valid(self) -> bool:
        ep = self.en_passant
        if ep is None:
            return True
        if not ep.in_bounds or self.get(ep) is not None:
            return False
        mover = self.active_color.opposite
        pawn_sq = ep.relative(0, mover.pawn_direction)
        if not pawn_sq.in_bounds:
            return False
        return self.is_piece_at(pawn_sq, Piece(mover, PieceType.PAWN))

    def validate_en_passant(self) -> None:
        if not self._is_en_passant_valid():
            self.en_passant = None

    # ── Line helpers (strictly-between squares) ──────────────────────────

    def is_file_open(self, file: int, from_rank: int, to_rank: int) -> bool:
        low, high = sorted((from_rank, to_rank))
        return all(self.get(Square(file, r)) is None for r in range(low + 1, high))

    def is_rank_open(self, rank: int, from_file: int, to_file: int) -> bool:
        low, high = sorted((from_file, to_file))
        return all(self.get(Square(f, rank)) is None for f in range(low + 1, high))

    def is_diagonal_open(
        self, from_file: int, from_rank: int, to_file: int, to_rank: int
    ) -> bool:
        file_delta = 1 if to_file > from_file else -1
        rank_delta = 1 if to_rank > from_rank else -1
        steps = min(abs(to_file - from_file), abs(to_rank - from_rank))
        for i in range(1, steps):
            sq = Square(from_file + i * file_delta, from_rank + i * rank_delta)
            if self.get(sq) is not None:
                return False
        return True

    # ── Rules oracle ─────────────────────────────────────────────────────

    def is_move_possible(self, from_sq: Square, to_sq: Square) -> bool:
        """Pseudo-legal check: geometry and occupancy, ignoring self-check."""
        if not (from_sq.in_bounds and to_sq.in_bounds) or from_sq == to_sq:
            return False
        piece = self.get(from_sq)
        if piece is None:
            return False
        target = self.get(to_sq)
        if target is not None and target.color == piece.color:
            return False

        file_diff = to_sq.file - from_sq.file
        rank_diff = to_sq.rank - from_sq.rank
        abs_file = abs(file_diff)
        abs_rank = abs(rank_diff)
        kind = piece.piece_type

        if kind in (PieceType.ROOK, PieceType.QUEEN):
            if file_diff == 0 and self.is_file_open(
                from_sq.file, from_sq.rank, to_sq.rank
            ):
                return True
            if rank_diff == 0 and self.is_rank_open(
                from_sq.rank, from_sq.file, to_sq.file
            ):
                return True
        if kind in (PieceType.BISHOP, PieceType.QUEEN):
            return abs_file == abs_rank and self.is_diagonal_open(
                from_sq.file, from_sq.rank, to_sq.file, to_sq.rank
            )
        if kind == PieceType.KNIGHT:
            return {abs_file, abs_rank} == {1, 2}
        if kind == PieceType.KING:
            return abs_file <= 1 and abs_rank <= 1
        if kind == PieceType.PAWN:
            return self._is_pawn_move_possible(piece.color, from_sq, to_sq, target)
        return False

    def _is_pawn_move_possible(
        self, color: Color, from_sq: Square, to_sq: Square, target: Piece | None
    ) -> bool:
        direction = color.pawn_direction
        start_rank = color.back_rank + direction
        capture = to_sq == self.en_passant or target is not None
        file_diff = abs(to_sq.file - from_sq.file)
        rank_diff = to_sq.rank - from_sq.rank

        if file_diff != (1 if capture else 0):
            return False
        if rank_diff == direction:
            return True
        if capture or from_sq.rank != start_rank or rank_diff != 2 * direction:
            return False
        # Double step: the square jumped over must be empty too.
        return self.get(from_sq.relative(0, direction)) is None

    def is_attacked_by(self, sq: Square, color: Color) -> bool:
        """Whether any piece of *color* could pseudo-legally move onto *sq*."""
        return any(
            self.is_move_possible(from_sq, sq) for from_sq, _ in self.occupied(color)
        )

    def is_in_check(self, color: Color) -> bool:
        king_sq = self.find(Piece(color, PieceType.KING))
        if king_sq is None:
            return False
        return self.is_attacked_by(king_sq, color.opposite)

    def is_legal(self, move: Move) -> bool:
        """Pseudo-legal and does not leave the mover's king in check."""
        if not move.is_possible_on(self):
            return False
        trial = self.copy()
        move.play(trial)
        return not trial.is_in_check(self.active_color)

    def perform(self, move: Move) -> None:
        """Apply *move*, then update rights, en passant and clocks.

        Illegal moves are logged and applied anyway: engine answers and
        moves already made on a physical surface are taken as fact.
        """
        if not self.is_legal(move):
            _LOGGER.warning("Playing illegal move %s", move.to_san())

        move.play(self)
        self.validate_castling()
        self.en_passant = move.en_passant_square()

        if move.is_pawn_move_or_capture():
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        self.active_color = self.active_color.opposite
        if self.active_color == Color.WHITE:
            self.fullmove_number += 1
        self.validate_en_passant()

    # ── FEN ──────────────────────────────────────────────────────────────

    def to_fen(self) -> str:
        return position_to_fen(self)

    def load_fen(self, fen: str) -> None:
        """Replace the whole state with the one encoded in *fen*."""
        record = parse_fen(fen)
        self._squares = [None] * 64
        for sq, piece in record.pieces.items():
            self.set(sq, piece)
        self.active_color = record.active_color
        self.castling = record.castling
        self.en_passant = record.en_passant
        self.halfmove_clock = record.halfmove_clock
        self.fullmove_number = record.fullmove_number

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        pos = Position(
            active_color=self.active_color,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            site=self.site,
        )
        pos._squares = self._squares.copy()
        return pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self._squares == other._squares
            and self.active_color == other.active_color
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def pretty(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self.get(Square(file, rank))
                row.append(p.letter if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Position({self.copy().to_fen()!r})"
