"""Turn hand-made surface changes into moves.

A person moves a piece by lifting it (REMOVE) and putting it down (PLACE);
a capture lifts the victim first.  :class:`SurfaceMoveTracker` watches the
surfaces of registered games, pairs those events up and feeds the
resulting move to :meth:`Game.post_move`.
"""

from __future__ import annotations

import logging
import weakref

from chessframe.core.enums import PieceType, SurfaceAction
from chessframe.core.move import CastleMove, Move
from chessframe.core.piece import Piece
from chessframe.core.types import Square
from chessframe.game.game import Game
from chessframe.surface.interfaces import BoardSurface, SurfaceEvent

_LOGGER = logging.getLogger(__name__)


class SurfaceMoveTracker:
    """Registry of surface → games plus the per-game pairing state.

    Surfaces and games are held weakly: dropping a game (or its surface)
    is enough to unregister it.
    """

    __slots__ = ("_games", "_from_squares", "_from_types", "_captured_squares")

    def __init__(self) -> None:
        self._games: weakref.WeakKeyDictionary[BoardSurface, weakref.WeakSet[Game]] = (
            weakref.WeakKeyDictionary()
        )
        self._from_squares: weakref.WeakKeyDictionary[Game, Square] = (
            weakref.WeakKeyDictionary()
        )
        self._from_types: weakref.WeakKeyDictionary[Game, PieceType] = (
            weakref.WeakKeyDictionary()
        )
        self._captured_squares: weakref.WeakKeyDictionary[Game, Square] = (
            weakref.WeakKeyDictionary()
        )

    # ── Registry ─────────────────────────────────────────────────────────

    def register_game(self, game: Game) -> None:
        """Start tracking *game*'s surface.

        Raises:
            ValueError: if the game has no surface.
        """
        surface = game.surface
        if surface is None:
            raise ValueError("Only games with a surface can be registered")
        games = self._games.get(surface)
        if games is None:
            games = weakref.WeakSet()
            self._games[surface] = games
            surface.subscribe(self.handle_event)
        games.add(game)

    def unregister_game(self, game: Game) -> None:
        surface = game.surface
        if surface is None:
            raise ValueError("Only games with a surface can be registered")
        games = self._games.get(surface)
        if games is not None:
            games.discard(game)
            if not games:
                del self._games[surface]
                surface.unsubscribe(self.handle_event)
        self._reset(game)

    def games_on(self, surface: BoardSurface) -> set[Game]:
        return set(self._games.get(surface, ()))

    # ── Events ───────────────────────────────────────────────────────────

    def handle_event(self, surface: BoardSurface, event: SurfaceEvent) -> Move | None:
        """Feed one surface event to every game on *surface*.

        Returns the move completed by this event, if any.
        """
        completed: Move | None = None
        for game in list(self._games.get(surface, ())):
            move = self._handle_for_game(game, surface, event)
            if move is not None:
                completed = move
        return completed

    def _handle_for_game(
        self, game: Game, surface: BoardSurface, event: SurfaceEvent
    ) -> Move | None:
        piece = event.piece
        if event.action == SurfaceAction.REMOVE:
            if piece.color == game.position.active_color:
                self._from_squares[game] = event.square
                self._from_types[game] = piece.piece_type
            else:
                self._captured_squares[game] = event.square
            return None

        move = self._build_move(game, surface, event.square, piece)
        if move is None:
            _LOGGER.debug("Ignoring placement of %s on %s", piece, event.square)
            return None
        game.post_move(move)
        self._captured_squares.pop(game, None)
        return move

    def _build_move(
        self, game: Game, surface: BoardSurface, to_sq: Square, to_piece: Piece
    ) -> Move | None:
        from_sq = self._from_squares.pop(game, None)
        from_type = self._from_types.pop(game, None)
        if from_sq is None or from_type is None or to_sq == from_sq:
            return None

        captured_sq = self._captured_squares.pop(game, None)
        capture = to_sq == captured_sq
        if not capture and from_type == PieceType.PAWN and to_sq.file != from_sq.file:
            # En passant: the victim was never lifted, take it off here.
            captured_sq = Square(to_sq.file, from_sq.rank)
            capture = True
            surface.set(captured_sq, None)

        if to_piece.piece_type != from_type:
            return Move.promotion(from_sq, to_sq, to_piece.piece_type, capture)

        color = to_piece.color
        if (
            from_type == PieceType.KING
            and from_sq.file == 4
            and from_sq.rank == color.back_rank
        ):
            if to_sq.file == 6:
                return self._castle(surface, CastleMove(color, queenside=False))
            if to_sq.file == 2:
                return self._castle(surface, CastleMove(color, queenside=True))

        return Move.normal(from_type, from_sq, to_sq, capture)

    @staticmethod
    def _castle(surface: BoardSurface, move: CastleMove) -> CastleMove:
        # The person only moved the king; the rook follows on its own.
        surface.move(move.rook_square, move.king_square.relative(move.direction, 0))
        return move

    def _reset(self, game: Game) -> None:
        self._from_squares.pop(game, None)
        self._from_types.pop(game, None)
        self._captured_squares.pop(game, None)
