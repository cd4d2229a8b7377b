"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto

from chessframe.core.errors import InvalidNotationError


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def back_rank(self) -> int:
        """Rank index holding this side's king and rooks at the start."""
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_direction(self) -> int:
        """Rank delta of a single pawn step."""
        return 1 if self is Color.WHITE else -1

    @property
    def promotion_rank(self) -> int:
        return self.opposite.back_rank

    @property
    def letter(self) -> str:
        """FEN side-to-move letter."""
        return "w" if self is Color.WHITE else "b"

    def convert_letter(self, letter: str) -> str:
        """Map a piece letter to this side's case (upper = white)."""
        return letter.upper() if self is Color.WHITE else letter.lower()

    @classmethod
    def from_letter(cls, letter: str) -> Color:
        lowered = letter.lower()
        if lowered == "w":
            return cls.WHITE
        if lowered == "b":
            return cls.BLACK
        raise InvalidNotationError(f"Invalid color letter: {letter!r}")

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Piece kinds in the order the notation tables list them."""

    KING = 1
    QUEEN = 2
    ROOK = 3
    BISHOP = 4
    KNIGHT = 5
    PAWN = 6

    @property
    def letter(self) -> str:
        """Uppercase FEN/SAN letter."""
        return _TYPE_LETTERS[self]

    @classmethod
    def from_letter(cls, letter: str) -> PieceType:
        try:
            return _LETTER_TYPES[letter.upper()]
        except KeyError:
            raise InvalidNotationError(f"Invalid piece letter: {letter!r}") from None


_TYPE_LETTERS: dict[PieceType, str] = {
    PieceType.KING: "K",
    PieceType.QUEEN: "Q",
    PieceType.ROOK: "R",
    PieceType.BISHOP: "B",
    PieceType.KNIGHT: "N",
    PieceType.PAWN: "P",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in _TYPE_LETTERS.items()}


class CheckStatus(Enum):
    """Check annotation carried by a move (affects SAN only)."""

    CHECK = "+"
    CHECKMATE = "#"

    @property
    def suffix(self) -> str:
        return self.value

    @classmethod
    def from_suffix(cls, suffix: str) -> CheckStatus | None:
        for status in cls:
            if status.value == suffix:
                return status
        return None


class SurfaceAction(Enum):
    """Kind of change a player made on a board surface."""

    PLACE = "place"
    REMOVE = "remove"


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, queenside: bool) -> CastlingRights:
        """The single right for *color* on the given wing."""
        if color is Color.WHITE:
            return cls.WHITE_QUEENSIDE if queenside else cls.WHITE_KINGSIDE
        return cls.BLACK_QUEENSIDE if queenside else cls.BLACK_KINGSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color is Color.WHITE else cls.BLACK_BOTH


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
