"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator

import pytest

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for event-loop tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def process_events(qapp: object) -> Iterator[Callable[..., bool]]:
    """Return a helper that pumps the Qt event loop until a condition holds."""
    import time

    from PyQt6.QtCore import QCoreApplication

    def pump(
        condition: Callable[[], bool] | None = None, timeout_s: float = 5.0
    ) -> bool:
        deadline = time.monotonic() + timeout_s
        while True:
            QCoreApplication.processEvents()
            if condition is None or condition():
                return True
            if time.monotonic() > deadline:
                return False
            time.sleep(0.005)

    yield pump
