"""Game management layer — game record, players, turn loop.

Quick start::

    from chessframe.core.enums import Color
    from chessframe.game import EnginePlayer, Game
    from chessframe.engine import UciEngine

    game = Game.new()
    game.set_player(Color.WHITE, EnginePlayer(UciEngine("stockfish")))
    game.play_turn().result()
"""

from chessframe.game.interfaces import GameResult, IMoveOracle, IPlayer, SearchLimit
from chessframe.game.game import Game, GameEvents
from chessframe.game.player import EnginePlayer, HumanPlayer
from chessframe.game.loop import PlayLoop

__all__ = [
    # Interfaces
    "GameResult",
    "IMoveOracle",
    "IPlayer",
    "SearchLimit",
    # Concrete
    "EnginePlayer",
    "Game",
    "GameEvents",
    "HumanPlayer",
    "PlayLoop",
]
