"""Abstract board surface: whatever shows the game to people and lets them
move pieces by hand."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from chessframe.core.enums import SurfaceAction
from chessframe.core.piece import Piece
from chessframe.core.types import Square

SurfaceListener = Callable[["BoardSurface", "SurfaceEvent"], None]


@dataclass(frozen=True, slots=True)
class SurfaceEvent:
    """A piece placed on or removed from one square by a person."""

    action: SurfaceAction
    square: Square
    piece: Piece


class BoardSurface(ABC):
    """Interface for a visible board.

    ``get``/``set``/``move`` are raw writes: no rules are checked and no
    events are emitted.  Events are only for changes a person makes.
    """

    @abstractmethod
    def get(self, sq: Square) -> Piece | None: ...

    @abstractmethod
    def set(self, sq: Square, piece: Piece | None) -> bool:
        """Show *piece* on *sq*; ``False`` when the square cannot be written."""

    def move(self, from_sq: Square, to_sq: Square) -> bool:
        piece = self.get(from_sq)
        if piece is None:
            return False
        return self.set(from_sq, None) and self.set(to_sq, piece)

    @abstractmethod
    def subscribe(self, listener: SurfaceListener) -> None:
        """Call *listener* for every :class:`SurfaceEvent` on this surface."""

    @abstractmethod
    def unsubscribe(self, listener: SurfaceListener) -> None: ...
