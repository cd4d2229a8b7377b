"""Concrete player implementations."""

from __future__ import annotations

import logging
import weakref
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from chessframe.core.notation.uci import move_from_uci
from chessframe.game.interfaces import IMoveOracle, IPlayer, SearchLimit

if TYPE_CHECKING:
    from chessframe.core.move import Move
    from chessframe.core.position import Position
    from chessframe.game.game import Game

_LOGGER = logging.getLogger(__name__)


class HumanPlayer(IPlayer):
    """A human participant whose moves come from the board surface.

    ``choose_move`` fails straight away; a human's moves are picked up by
    :class:`~chessframe.surface.tracker.SurfaceMoveTracker` instead.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def choose_move(self, position: Position) -> Future[Move]:
        future: Future[Move] = Future()
        future.set_exception(
            NotImplementedError(f"{self._name} moves on the board surface")
        )
        return future

    def __repr__(self) -> str:
        return f"HumanPlayer({self._name!r})"


class EnginePlayer(IPlayer):
    """A player backed by an :class:`IMoveOracle`.

    Oracle calls are blocking, so they run on a single-worker pool: requests
    to one engine are served strictly one after another.  The answer is
    parsed against the snapshot handed to :meth:`choose_move`.

    Args:
        oracle: Engine to consult.  The player owns it and closes it.
        name: Display name; defaults to the oracle's ``name`` if it has one.
        executor: Pool to run oracle calls on.  A private single-thread
            pool is created (and shut down on :meth:`close`) when omitted.
    """

    __slots__ = (
        "_oracle",
        "_name",
        "_executor",
        "_owns_executor",
        "_depth",
        "_move_time_ms",
        "_last_game",
        "_needs_new_game",
        "_closed",
    )

    def __init__(
        self,
        oracle: IMoveOracle,
        name: str | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._oracle = oracle
        self._name = name or str(getattr(oracle, "name", None) or "Engine")
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="chessframe-engine"
        )
        self._depth: int | None = None
        self._move_time_ms: int | None = None
        self._last_game: weakref.ReferenceType[Game] | None = None
        self._needs_new_game = True
        self._closed = False

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def oracle(self) -> IMoveOracle:
        return self._oracle

    @property
    def depth(self) -> int | None:
        return self._depth

    @depth.setter
    def depth(self, value: int | None) -> None:
        """Search to a fixed depth; clears any move time."""
        self._depth = value
        self._move_time_ms = None

    @property
    def move_time_ms(self) -> int | None:
        return self._move_time_ms

    @move_time_ms.setter
    def move_time_ms(self, value: int | None) -> None:
        """Search for a fixed time; clears any depth."""
        self._move_time_ms = value
        self._depth = None

    @property
    def limit(self) -> SearchLimit:
        return SearchLimit(depth=self._depth, move_time_ms=self._move_time_ms)

    @property
    def closed(self) -> bool:
        return self._closed

    # ── IPlayer impl ─────────────────────────────────────────────────────

    def start_game(self, game: Game) -> None:
        """Remember *game*; the next search starts with ``new_game`` if it
        differs from the game this player last played."""
        if self._last_game is not None and self._last_game() is game:
            return
        self._last_game = weakref.ref(game)
        self._needs_new_game = True

    def choose_move(self, position: Position) -> Future[Move]:
        if self._closed:
            future: Future[Move] = Future()
            future.set_exception(RuntimeError(f"{self._name} is closed"))
            return future
        announce = self._needs_new_game
        self._needs_new_game = False
        return self._executor.submit(self._search, position, self.limit, announce)

    def _search(self, position: Position, limit: SearchLimit, announce: bool) -> Move:
        if announce:
            self._oracle.new_game()
        fen = position.to_fen()
        self._oracle.position_fen(fen)
        answer = self._oracle.best_move(limit)
        _LOGGER.debug("%s answered %s for %s", self._name, answer, fen)
        # The position is known, so castling is read off the king itself.
        return move_from_uci(answer, position, castle_shortcut=False)

    def close(self) -> None:
        """Close the oracle and stop the worker pool.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        self._oracle.close()
        _LOGGER.info("Closed engine player %s", self._name)

    def __enter__(self) -> EnginePlayer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"EnginePlayer({self._name!r})"
