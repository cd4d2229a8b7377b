"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessframe.core.enums import Color, PieceType
from chessframe.core.errors import InvalidNotationError


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    @property
    def letter(self) -> str:
        """FEN letter (uppercase = white, lowercase = black)."""
        return self.color.convert_letter(self.piece_type.letter)

    def __str__(self) -> str:
        return self.letter

    @classmethod
    def from_letter(cls, letter: str) -> Piece:
        """Create piece from FEN letter, e.g. 'N' → white knight."""
        if len(letter) != 1 or not letter.isalpha():
            raise InvalidNotationError(f"Invalid piece letter: {letter!r}")
        color = Color.BLACK if letter.islower() else Color.WHITE
        return cls(color, PieceType.from_letter(letter))
