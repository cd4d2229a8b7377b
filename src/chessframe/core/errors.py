"""Exception hierarchy for the rules core and its collaborators."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by chessframe."""


class InvalidNotationError(ChessError, ValueError):
    """Malformed FEN, SAN, UCI or square text."""


class AmbiguousSanError(InvalidNotationError):
    """SAN whose disambiguator matches no movable piece."""


class NoSuchPieceError(ChessError, LookupError):
    """A move refers to an empty origin square."""


class IllegalMoveError(ChessError, ValueError):
    """A move does not satisfy the legality rules of a position."""


class OracleError(ChessError, RuntimeError):
    """A move oracle (engine process, transport) failed to answer."""
