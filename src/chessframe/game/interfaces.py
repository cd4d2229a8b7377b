"""Abstract interfaces for the game layer.

A :class:`~chessframe.game.game.Game` depends only on these ABCs; engines,
humans and anything else that can choose a move plug in behind them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessframe.core.enums import GameResult

if TYPE_CHECKING:
    from chessframe.core.move import Move
    from chessframe.core.position import Position
    from chessframe.game.game import Game

__all__ = ["GameResult", "IMoveOracle", "IPlayer", "SearchLimit"]


# ── Search limits ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SearchLimit:
    """How long an oracle may think: a depth *or* a time budget.

    With neither set the oracle falls back to its own default budget.
    """

    depth: int | None = None
    move_time_ms: int | None = None

    def __post_init__(self) -> None:
        if self.depth is not None and self.move_time_ms is not None:
            raise ValueError("SearchLimit takes a depth or a move time, not both")
        if self.depth is not None and self.depth <= 0:
            raise ValueError("Search depth must be positive")
        if self.move_time_ms is not None and self.move_time_ms <= 0:
            raise ValueError("Move time must be positive")

    @classmethod
    def of_depth(cls, depth: int) -> SearchLimit:
        return cls(depth=depth)

    @classmethod
    def of_time(cls, move_time_ms: int) -> SearchLimit:
        return cls(move_time_ms=move_time_ms)


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IMoveOracle(ABC):
    """Something that, given a position, answers with a best move in UCI LAN.

    Calls are blocking; callers that must stay responsive run them on a
    worker thread (see :class:`~chessframe.game.player.EnginePlayer`).
    """

    @abstractmethod
    def new_game(self) -> None:
        """Signal that the following positions belong to a new game."""

    @abstractmethod
    def position_fen(self, fen: str) -> None:
        """Set the position to search from."""

    @abstractmethod
    def best_move(self, limit: SearchLimit) -> str:
        """Search the current position and return the chosen move."""

    @abstractmethod
    def close(self) -> None:
        """Release the oracle.  Closing twice is a no-op."""


class IPlayer(ABC):
    """Interface for a game participant (human or engine)."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def choose_move(self, position: Position) -> Future[Move]:
        """Begin the move-selection process for *position*.

        The returned future resolves with the chosen move.  *position* is
        a snapshot owned by the player; it may be read from any thread.
        """

    def start_game(self, game: Game) -> None:
        """Called when the player is seated at *game* and before each of its
        turns there.

        A player may serve several games; repeated calls for the same game
        should be cheap.
        """

    def opponent_moved(self, position: Position, move: Move) -> None:
        """Called after the other side's *move* has been applied."""

    def close(self) -> None:
        """Release whatever the player holds."""
