"""Engine package: UCI subprocess oracle and Qt main-thread bridge."""

from chessframe.engine.qt_bridge import MainThreadPoster, Poster, direct_post
from chessframe.engine.uci_engine import EngineOption, UciEngine

__all__ = [
    "EngineOption",
    "MainThreadPoster",
    "Poster",
    "UciEngine",
    "direct_post",
]
