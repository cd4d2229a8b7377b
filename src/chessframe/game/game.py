"""Game — a position, the moves played on it, and the players choosing them.

Emits events via simple callbacks so hosts and tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from chessframe.core.enums import Color, GameResult
from chessframe.core.errors import IllegalMoveError
from chessframe.core.notation.fen import STARTING_FEN
from chessframe.core.notation.pgn import (
    PGN_RESULT_TOKENS,
    build_pgn,
    game_result_from_pgn,
    pgn_date,
    pgn_movetext,
    pgn_result_token,
    pgn_time,
)
from chessframe.core.position import Position
from chessframe.core.types import all_squares
from chessframe.engine.qt_bridge import Poster, direct_post
from chessframe.game.interfaces import IPlayer

if TYPE_CHECKING:
    from chessframe.config import CoreConfig
    from chessframe.core.move import Move
    from chessframe.surface.interfaces import BoardSurface

_LOGGER = logging.getLogger(__name__)

DEFAULT_EVENT = "Casual Game"

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[["Move", str, "Game"], None]  # move, san, game
ResultCallback = Callable[[str], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_result: list[ResultCallback] = field(default_factory=list)


# ── Game ─────────────────────────────────────────────────────────────────────


class Game:
    """A chess game played on one :class:`Position`.

    The initial state is captured at construction time so the PGN export
    can number moves and emit ``SetUp``/``FEN`` for non-standard starts.

    Thread-safety: every mutating method must be called from the thread
    that owns the game.  Players answer on worker threads; ``play_turn``
    routes their moves back through a poster.
    """

    __slots__ = (
        "__weakref__",
        "_position",
        "_initial_fen",
        "_initial_color",
        "_initial_move_number",
        "_moves",
        "_players",
        "_result",
        "event",
        "round",
        "start_time",
        "surface",
        "events",
    )

    def __init__(
        self,
        position: Position,
        *,
        event: str = DEFAULT_EVENT,
        round: int = 1,
        start_time: datetime | None = None,
        surface: BoardSurface | None = None,
    ) -> None:
        self._position = position
        fen = position.to_fen()
        self._initial_fen: str | None = None if fen == STARTING_FEN else fen
        self._initial_color = position.active_color
        self._initial_move_number = position.fullmove_number
        self._moves: list[Move] = []
        self._players: dict[Color, IPlayer] = {}
        self._result = "*"
        self.event = event
        self.round = round
        self.start_time = start_time if start_time is not None else datetime.now()
        self.surface = surface
        self.events = GameEvents()

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def new(cls, config: CoreConfig | None = None, **kwargs: object) -> Game:
        """Game from the standard start, sited per *config*."""
        site = config.default_site if config is not None else ""
        return cls(Position.initial(site=site), **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_fen(
        cls, fen: str, config: CoreConfig | None = None, **kwargs: object
    ) -> Game:
        site = config.default_site if config is not None else ""
        return cls(Position.from_fen(fen, site=site), **kwargs)  # type: ignore[arg-type]

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def initial_fen(self) -> str | None:
        """Starting FEN, or ``None`` for the standard start."""
        return self._initial_fen

    @property
    def initial_color(self) -> Color:
        return self._initial_color

    @property
    def initial_move_number(self) -> int:
        return self._initial_move_number

    @property
    def site(self) -> str:
        return self._position.site

    @site.setter
    def site(self, value: str) -> None:
        self._position.site = value

    @property
    def result(self) -> str:
        """PGN result token: ``*``, ``1-0``, ``0-1`` or ``1/2-1/2``."""
        return self._result

    @result.setter
    def result(self, token: str) -> None:
        if token not in PGN_RESULT_TOKENS:
            raise ValueError(f"Invalid PGN result: {token!r}")
        if token == self._result:
            return
        self._result = token
        for cb in self.events.on_result:
            cb(token)

    @property
    def game_result(self) -> GameResult:
        return game_result_from_pgn(self._result)

    @game_result.setter
    def game_result(self, value: GameResult) -> None:
        self.result = pgn_result_token(value)

    # ── Players ──────────────────────────────────────────────────────────

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    def set_player(self, color: Color, player: IPlayer) -> None:
        self._players[color] = player
        player.start_game(self)

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._position.active_color)

    # ── Moves ────────────────────────────────────────────────────────────

    def play_move(self, move: Move, *, strict: bool = False) -> None:
        """Perform *move*, record it and mirror the result on the surface.

        With ``strict`` an illegal move raises :class:`IllegalMoveError`
        instead of being logged and applied.
        """
        if strict and not self._position.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move} in {self._position!r}")
        self._position.perform(move)
        self._record(move)
        self.sync_surface()
        self._after_move(move)

    def post_move(self, move: Move) -> None:
        """Record a move that already happened on the surface.

        The position is updated; the surface is not written back, since it
        is where the move came from.
        """
        self._position.perform(move)
        self._record(move)
        self._after_move(move)

    def play_turn(self, post: Poster = direct_post) -> Future[Move | None]:
        """Ask the side to move for a move and play it.

        The returned future resolves with the played move once it has been
        applied on the thread *post* delivers to, with ``None`` when no
        player is seated for the side to move, and with the player's
        exception if choosing failed.
        """
        outcome: Future[Move | None] = Future()
        player = self.current_player
        if player is None:
            _LOGGER.debug("No player for %s", self._position.active_color)
            outcome.set_result(None)
            return outcome

        snapshot = self._position.copy()
        pending_fen = snapshot.to_fen()
        try:
            player.start_game(self)
            request = player.choose_move(snapshot)
        except Exception as exc:
            _LOGGER.warning("%s failed to start choosing: %s", player.name, exc)
            outcome.set_exception(exc)
            return outcome

        def apply(move: Move) -> None:
            if outcome.done():
                return
            if self._position.to_fen() != pending_fen:
                _LOGGER.warning("Dropping stale move %s", move)
                outcome.set_result(None)
                return
            try:
                self.play_move(move)
            except Exception as exc:
                outcome.set_exception(exc)
                return
            outcome.set_result(move)

        def on_done(answer: Future[Move]) -> None:
            if answer.cancelled():
                outcome.cancel()
                return
            exc = answer.exception()
            if exc is not None:
                outcome.set_exception(exc)
                return
            move = answer.result()
            post(lambda: apply(move))

        request.add_done_callback(on_done)
        return outcome

    def _record(self, move: Move) -> None:
        self._moves.append(move)
        san = move.to_san()
        _LOGGER.debug("Move %d: %s", len(self._moves), san)
        for cb in self.events.on_move:
            cb(move, san, self)

    def _after_move(self, move: Move) -> None:
        nxt = self.current_player
        if nxt is not None:
            nxt.opponent_moved(self._position.copy(), move)

    def san_history(self) -> list[str]:
        return [move.to_san() for move in self._moves]

    # ── Surface ──────────────────────────────────────────────────────────

    def sync_surface(self) -> int:
        """Write every square that differs onto the surface.

        Returns the number of squares written.
        """
        if self.surface is None:
            return 0
        written = 0
        for sq in all_squares():
            piece = self._position.get(sq)
            if self.surface.get(sq) != piece and self.surface.set(sq, piece):
                written += 1
        return written

    # ── Export ───────────────────────────────────────────────────────────

    def to_fen(self) -> str:
        return self._position.to_fen()

    def headers(self) -> dict[str, str]:
        white = self._players.get(Color.WHITE)
        black = self._players.get(Color.BLACK)
        headers = {
            "Event": self.event,
            "Site": self.site,
            "Date": pgn_date(self.start_time),
            "Round": str(self.round),
            "White": white.name if white is not None else "White",
            "Black": black.name if black is not None else "Black",
            "Result": self._result,
            "Time": pgn_time(self.start_time),
            "Mode": "ICS",
        }
        if self._initial_fen is not None:
            headers["SetUp"] = "1"
            headers["FEN"] = self._initial_fen
        return headers

    def to_pgn(self) -> str:
        movetext = pgn_movetext(
            self.san_history(),
            self._result,
            initial_color=self._initial_color,
            initial_move_number=self._initial_move_number,
        )
        return build_pgn(self.headers(), movetext)

    def __repr__(self) -> str:
        return (
            f"Game(event={self.event!r}, round={self.round}, "
            f"moves={len(self._moves)}, result={self._result!r})"
        )
