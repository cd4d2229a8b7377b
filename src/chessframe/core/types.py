"""Square value type and coordinate helpers.

Files and ranks are both 0–7: file 0 is *a*, rank 0 is white's back rank.
Board iteration is file-major::

    a1, a2, ..., a8, b1, b2, ..., h8

and every "first match" lookup (piece search, SAN tie-breaks) follows it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from chessframe.core.errors import InvalidNotationError

_FILES = "abcdefgh"
_RANKS = "12345678"


def in_bounds(index: int) -> bool:
    """Whether a file or rank index lies on the board."""
    return 0 <= index < 8


@dataclass(frozen=True, slots=True)
class Square:
    """Immutable board coordinate."""

    file: int
    rank: int

    @property
    def in_bounds(self) -> bool:
        return in_bounds(self.file) and in_bounds(self.rank)

    def relative(self, file_delta: int, rank_delta: int) -> Square:
        """Square offset from this one (may fall off the board)."""
        return Square(self.file + file_delta, self.rank + rank_delta)

    @classmethod
    def parse(cls, name: str) -> Square:
        """Parse square name, e.g. 'e4' → Square(4, 3)."""
        if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
            raise InvalidNotationError(f"Invalid square name: {name!r}")
        return cls(_FILES.index(name[0]), _RANKS.index(name[1]))

    def __str__(self) -> str:
        return chr(ord("a") + self.file) + chr(ord("1") + self.rank)

    def __repr__(self) -> str:
        if self.in_bounds:
            return f"Square({self})"
        return f"Square(file={self.file}, rank={self.rank})"


def parse_square(name: str) -> Square:
    return Square.parse(name)


def all_squares() -> Iterator[Square]:
    """Every board square in file-major order."""
    for file in range(8):
        for rank in range(8):
            yield Square(file, rank)


# ── Named square constants ──────────────────────────────────────────────────

A1, A2, A3, A4, A5, A6, A7, A8 = (Square(0, r) for r in range(8))
B1, B2, B3, B4, B5, B6, B7, B8 = (Square(1, r) for r in range(8))
C1, C2, C3, C4, C5, C6, C7, C8 = (Square(2, r) for r in range(8))
D1, D2, D3, D4, D5, D6, D7, D8 = (Square(3, r) for r in range(8))
E1, E2, E3, E4, E5, E6, E7, E8 = (Square(4, r) for r in range(8))
F1, F2, F3, F4, F5, F6, F7, F8 = (Square(5, r) for r in range(8))
G1, G2, G3, G4, G5, G6, G7, G8 = (Square(6, r) for r in range(8))
H1, H2, H3, H4, H5, H6, H7, H8 = (Square(7, r) for r in range(8))
