"""PlayLoop — drive a game turn after turn until stopped."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future

from chessframe.core.move import Move
from chessframe.engine.qt_bridge import Poster
from chessframe.game.game import Game

_LOGGER = logging.getLogger(__name__)


class PlayLoop:
    """Repeatedly calls :meth:`Game.play_turn`, one turn at a time.

    The next turn is only requested once the previous move has been
    applied.  :meth:`cancel` stops further turns from being scheduled; a
    request already handed to a player is left to finish.

    The loop ends by itself when no player is seated for the side to move,
    when a turn fails, or after ``max_plies`` moves.  ``done`` then
    resolves with the number of moves this loop played (or the failure).

    Args:
        game: Game to drive.
        post: Delivers callables to the game's thread.
        on_move: Called on the game's thread after each played move.
        on_error: Called with the exception of a failed turn.
        max_plies: Stop after this many moves (``None`` for no limit).
    """

    __slots__ = (
        "_game",
        "_post",
        "_on_move",
        "_on_error",
        "_max_plies",
        "_played",
        "_cancelled",
        "_running",
        "_requesting",
        "_turn_again",
        "done",
        "__weakref__",
    )

    def __init__(
        self,
        game: Game,
        post: Poster,
        on_move: Callable[[Move], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
        *,
        max_plies: int | None = None,
    ) -> None:
        self._game = game
        self._post = post
        self._on_move = on_move
        self._on_error = on_error
        self._max_plies = max_plies
        self._played = 0
        self._cancelled = False
        self._running = False
        self._requesting = False
        self._turn_again = False
        self.done: Future[int] = Future()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def plies_played(self) -> int:
        return self._played

    # ── Control ──────────────────────────────────────────────────────────

    def start(self) -> Future[int]:
        if self._running or self.done.done():
            raise RuntimeError("PlayLoop already started")
        self._running = True
        self._next_turn()
        return self.done

    def cancel(self) -> None:
        """Stop after the turn in flight, if any."""
        if self._cancelled:
            return
        self._cancelled = True
        _LOGGER.info("Play loop cancelled after %d moves", self._played)

    # ── Internals ────────────────────────────────────────────────────────

    def _next_turn(self) -> None:
        if self._requesting:
            # A turn resolved synchronously inside play_turn; pick it up below
            # instead of nesting one stack level per move.
            self._turn_again = True
            return
        self._requesting = True
        try:
            while True:
                self._turn_again = False
                if self._cancelled:
                    self._finish()
                    return
                if self._max_plies is not None and self._played >= self._max_plies:
                    self._finish()
                    return
                turn = self._game.play_turn(self._post)
                turn.add_done_callback(self._turn_done)
                if not self._turn_again:
                    return
        finally:
            self._requesting = False

    def _turn_done(self, turn: Future[Move | None]) -> None:
        # Runs wherever the turn completed: on the game's thread for played
        # moves and failures raised while applying, possibly on a worker for
        # a failed request.  Either way the next turn is posted.
        if turn.cancelled():
            self._post(self._finish)
            return
        exc = turn.exception()
        if exc is not None:
            self._post(lambda: self._fail(exc))
            return
        move = turn.result()
        if move is None:
            self._post(self._finish)
            return
        self._played += 1
        if self._on_move is not None:
            self._on_move(move)
        self._post(self._next_turn)

    def _fail(self, exc: BaseException) -> None:
        _LOGGER.warning("Play loop stopped by %s: %s", type(exc).__name__, exc)
        self._running = False
        if self._on_error is not None:
            self._on_error(exc)
        if not self.done.done():
            self.done.set_exception(exc)

    def _finish(self) -> None:
        self._running = False
        if not self.done.done():
            self.done.set_result(self._played)
