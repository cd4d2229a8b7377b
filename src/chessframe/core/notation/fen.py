"""FEN parsing and serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessframe.core.enums import CastlingRights, Color
from chessframe.core.errors import InvalidNotationError
from chessframe.core.piece import Piece
from chessframe.core.types import Square

if TYPE_CHECKING:
    from chessframe.core.position import Position

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_LETTERS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


@dataclass(slots=True)
class FenRecord:
    """The six FEN fields, decoded."""

    pieces: dict[Square, Piece] = field(default_factory=dict)
    active_color: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.NONE
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1


def parse_placement(placement: str) -> dict[Square, Piece]:
    """Decode the piece-placement field (ranks 8 → 1)."""
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidNotationError(
            f"Invalid FEN board (must contain 8 ranks): {placement!r}"
        )
    pieces: dict[Square, Piece] = {}
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise InvalidNotationError(f"Invalid FEN digit {ch!r}: {placement!r}")
                file += step
            else:
                if file >= 8:
                    raise InvalidNotationError(f"Invalid FEN rank width: {placement!r}")
                pieces[Square(file, rank)] = Piece.from_letter(ch)
                file += 1
            if file > 8:
                raise InvalidNotationError(f"Invalid FEN rank width: {placement!r}")
        if file != 8:
            raise InvalidNotationError(f"Invalid FEN rank width: {placement!r}")
    return pieces


def parse_fen(fen: str) -> FenRecord:
    """Decode a FEN string without building a :class:`Position`."""
    parts = fen.split()
    if len(parts) != 6:
        raise InvalidNotationError(f"Invalid FEN (need 6 fields): {fen!r}")
    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    record = FenRecord(pieces=parse_placement(placement))

    if side_part not in ("w", "b"):
        raise InvalidNotationError(f"Invalid FEN side-to-move field: {side_part!r}")
    record.active_color = Color.from_letter(side_part)

    if castling_part != "-":
        for ch in castling_part:
            right = _CASTLING_LETTERS.get(ch)
            if right is None or record.castling & right:
                raise InvalidNotationError(
                    f"Invalid FEN castling field: {castling_part!r}"
                )
            record.castling |= right

    if ep_part != "-":
        record.en_passant = Square.parse(ep_part)

    try:
        record.halfmove_clock = int(halfmove_part)
        record.fullmove_number = int(fullmove_part)
    except ValueError:
        raise InvalidNotationError(f"Invalid FEN move counters: {fen!r}") from None
    if record.halfmove_clock < 0:
        raise InvalidNotationError(f"Invalid FEN halfmove clock: {halfmove_part!r}")
    if record.fullmove_number < 1:
        raise InvalidNotationError(f"Invalid FEN fullmove number: {fullmove_part!r}")
    return record


def format_placement(position: Position) -> str:
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = position.get(Square(file, rank))
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += piece.letter
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def format_castling(castling: CastlingRights) -> str:
    text = "".join(
        letter for letter, right in _CASTLING_LETTERS.items() if castling & right
    )
    return text or "-"


def position_to_fen(position: Position) -> str:
    """Serialise a :class:`Position` to FEN, normalising its invariants first."""
    position.validate_castling()
    position.validate_en_passant()

    ep_str = str(position.en_passant) if position.en_passant is not None else "-"
    return (
        f"{format_placement(position)} {position.active_color.letter} "
        f"{format_castling(position.castling)} {ep_str} "
        f"{position.halfmove_clock} {position.fullmove_number}"
    )


def position_from_fen(fen: str, site: str = "") -> Position:
    """Parse a FEN string into a new :class:`Position`."""
    from chessframe.core.position import Position

    position = Position(site=site)
    position.load_fen(fen)
    return position
