"""Host configuration threaded into games, surfaces and engine players."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from chessframe.core.enums import Color, PieceType
from chessframe.core.piece import Piece

_LOGGER = logging.getLogger(__name__)

DEFAULT_ENGINE_TIMEOUT_MS = 60_000


def _default_names() -> dict[PieceType, str]:
    return {piece_type: piece_type.name.capitalize() for piece_type in PieceType}


def _default_materials() -> dict[Piece, str]:
    return {
        Piece(color, piece_type): f"{color}_{piece_type.name.lower()}"
        for color in Color
        for piece_type in PieceType
    }


@dataclass(frozen=True)
class CoreConfig:
    """Everything the rules core takes from its host.

    ``piece_materials`` maps each piece to the token a board surface uses to
    show it; tokens must be unique so a surface can map them back.
    """

    piece_display_names: dict[PieceType, str] = field(default_factory=_default_names)
    piece_materials: dict[Piece, str] = field(default_factory=_default_materials)
    default_site: str = ""
    engine_command: str | None = None
    engine_default_timeout_ms: int = DEFAULT_ENGINE_TIMEOUT_MS

    def __post_init__(self) -> None:
        tokens = list(self.piece_materials.values())
        if len(set(tokens)) != len(tokens):
            raise ValueError("Piece material tokens must be unique")
        if self.engine_default_timeout_ms <= 0:
            raise ValueError("Engine timeout must be positive")

    def display_name(self, piece_type: PieceType) -> str:
        return self.piece_display_names.get(piece_type, piece_type.name.capitalize())

    def material_for(self, piece: Piece) -> str:
        return self.piece_materials[piece]

    def piece_for_material(self, token: str) -> Piece | None:
        for piece, material in self.piece_materials.items():
            if material == token:
                return piece
        return None


def load_config(path: str | Path) -> CoreConfig:
    """Read an INI file; every missing key falls back to its default.

    Layout::

        [engine]
        command=/usr/bin/stockfish
        timeout_ms=60000

        [site]
        default=My Server

        [pieces]
        names\\king=King
        materials\\white\\king=white_king
    """
    from PyQt6.QtCore import QSettings

    path = Path(path)
    defaults = CoreConfig()
    if not path.is_file():
        _LOGGER.warning("Config file not found, using defaults: %s", path)
        return defaults

    settings = QSettings(str(path), QSettings.Format.IniFormat)
    if settings.status() != QSettings.Status.NoError:
        raise ValueError(f"Unreadable config file: {path}")

    command = settings.value("engine/command", defaults.engine_command)
    timeout_ms = settings.value(
        "engine/timeout_ms", defaults.engine_default_timeout_ms, type=int
    )
    site = settings.value("site/default", defaults.default_site)

    names = {
        piece_type: str(
            settings.value(
                f"pieces/names/{piece_type.name.lower()}",
                defaults.display_name(piece_type),
            )
        )
        for piece_type in PieceType
    }
    materials = {
        piece: str(
            settings.value(
                f"pieces/materials/{piece.color}/{piece.piece_type.name.lower()}",
                token,
            )
        )
        for piece, token in defaults.piece_materials.items()
    }

    return CoreConfig(
        piece_display_names=names,
        piece_materials=materials,
        default_site=str(site),
        engine_command=str(command) if command else None,
        engine_default_timeout_ms=int(timeout_ms),
    )
