"""In-memory board surface."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chessframe.core.enums import SurfaceAction
from chessframe.core.piece import Piece
from chessframe.core.types import Square, all_squares
from chessframe.surface.interfaces import BoardSurface, SurfaceEvent, SurfaceListener

if TYPE_CHECKING:
    from chessframe.config import CoreConfig
    from chessframe.core.position import Position

_LOGGER = logging.getLogger(__name__)


class MemorySurface(BoardSurface):
    """Dict-backed surface.

    :meth:`lift` and :meth:`drop` act like a person's hand: they change the
    board *and* emit the matching event.  :meth:`drop_material` does the
    same from a display token, mapped through *config*.
    """

    __slots__ = ("_pieces", "_listeners", "_config")

    def __init__(self, config: CoreConfig | None = None) -> None:
        self._pieces: dict[Square, Piece] = {}
        self._listeners: list[SurfaceListener] = []
        self._config = config

    # ── BoardSurface impl ────────────────────────────────────────────────

    def get(self, sq: Square) -> Piece | None:
        return self._pieces.get(sq)

    def set(self, sq: Square, piece: Piece | None) -> bool:
        if not sq.in_bounds:
            return False
        if piece is None:
            self._pieces.pop(sq, None)
        else:
            self._pieces[sq] = piece
        return True

    def subscribe(self, listener: SurfaceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SurfaceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Hand actions ─────────────────────────────────────────────────────

    def lift(self, sq: Square) -> Piece | None:
        """Take the piece off *sq*, emitting REMOVE."""
        piece = self._pieces.pop(sq, None)
        if piece is not None:
            self._emit(SurfaceEvent(SurfaceAction.REMOVE, sq, piece))
        return piece

    def drop(self, sq: Square, piece: Piece) -> None:
        """Put *piece* on *sq*, emitting PLACE."""
        self._pieces[sq] = piece
        self._emit(SurfaceEvent(SurfaceAction.PLACE, sq, piece))

    def drop_material(self, sq: Square, token: str) -> Piece | None:
        """Put the piece shown by *token* on *sq*; unknown tokens are ignored."""
        if self._config is None:
            raise ValueError("drop_material needs a CoreConfig")
        piece = self._config.piece_for_material(token)
        if piece is None:
            _LOGGER.warning("Ignoring unknown piece material %r on %s", token, sq)
            return None
        self.drop(sq, piece)
        return piece

    def hand_move(self, from_sq: Square, to_sq: Square) -> None:
        """Move a piece by hand: lift any piece on *to_sq*, lift, drop."""
        if to_sq in self._pieces:
            self.lift(to_sq)
        piece = self.lift(from_sq)
        if piece is not None:
            self.drop(to_sq, piece)

    # ── Helpers ──────────────────────────────────────────────────────────

    def load_position(self, position: Position) -> None:
        """Show *position* without emitting events."""
        self._pieces = {sq: piece for sq, piece in position.occupied()}

    def materials(self) -> dict[Square, str]:
        """Display token per occupied square."""
        if self._config is None:
            return {sq: piece.letter for sq, piece in self._pieces.items()}
        return {sq: self._config.material_for(p) for sq, p in self._pieces.items()}

    def pretty(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self._pieces.get(Square(file, rank))
                row.append(p.letter if p else ".")
            rows.append(" ".join(row))
        return "\n".join(rows)

    def __len__(self) -> int:
        return len(self._pieces)

    def _emit(self, event: SurfaceEvent) -> None:
        for listener in list(self._listeners):
            listener(self, event)


def surface_matches(surface: BoardSurface, position: Position) -> bool:
    """Whether *surface* shows exactly the pieces of *position*."""
    return all(surface.get(sq) == position.get(sq) for sq in all_squares())
