"""Qt bridge that hands work from oracle worker threads to the game's thread."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, Qt, pyqtSignal, pyqtSlot

_LOGGER = logging.getLogger(__name__)

Poster = Callable[[Callable[[], None]], None]


def direct_post(fn: Callable[[], None]) -> None:
    """Run *fn* right away on the calling thread.

    Good enough for single-threaded hosts and for tests; anywhere a worker
    thread completes the future, use :class:`MainThreadPoster` instead.
    """
    fn()


class MainThreadPoster(QObject):
    """Thread-affine poster: callables posted from any thread run on the
    thread this object lives on, in posting order.

    Create it on the thread that owns the :class:`~chessframe.game.game.Game`
    (normally the one running the ``QCoreApplication`` event loop).
    """

    _posted = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._posted.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def post(self, fn: Callable[[], None]) -> None:
        self._posted.emit(fn)

    def __call__(self, fn: Callable[[], None]) -> None:
        self.post(fn)

    @pyqtSlot(object)
    def _run(self, fn: object) -> None:
        if not callable(fn):
            _LOGGER.warning("Ignoring non-callable post: %r", fn)
            return
        try:
            fn()
        except Exception:
            _LOGGER.exception("Posted callback failed")
