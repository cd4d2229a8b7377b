"""Board surfaces and the tracker that reads moves off them."""

from chessframe.surface.interfaces import BoardSurface, SurfaceEvent
from chessframe.surface.memory import MemorySurface
from chessframe.surface.tracker import SurfaceMoveTracker

__all__ = [
    "BoardSurface",
    "MemorySurface",
    "SurfaceEvent",
    "SurfaceMoveTracker",
]
