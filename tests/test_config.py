"""Tests for CoreConfig and INI loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from chessframe.config import CoreConfig, load_config
from chessframe.core.enums import Color, PieceType
from chessframe.core.piece import Piece

WHITE_KING = Piece(Color.WHITE, PieceType.KING)


class TestCoreConfig:
    def test_defaults(self) -> None:
        config = CoreConfig()
        assert config.default_site == ""
        assert config.engine_command is None
        assert config.engine_default_timeout_ms == 60_000
        assert config.display_name(PieceType.KNIGHT) == "Knight"
        assert config.material_for(WHITE_KING) == "white_king"
        assert len(config.piece_materials) == 12

    def test_piece_for_material(self) -> None:
        config = CoreConfig()
        black_queen = Piece(Color.BLACK, PieceType.QUEEN)
        assert config.piece_for_material("black_queen") == black_queen
        assert config.piece_for_material("nope") is None

    def test_duplicate_material_tokens(self) -> None:
        materials = dict(CoreConfig().piece_materials)
        materials[Piece(Color.BLACK, PieceType.KING)] = "white_king"
        with pytest.raises(ValueError, match="unique"):
            CoreConfig(piece_materials=materials)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            CoreConfig(engine_default_timeout_ms=0)

    def test_display_name_fallback(self) -> None:
        config = CoreConfig(piece_display_names={PieceType.KING: "Roi"})
        assert config.display_name(PieceType.KING) == "Roi"
        assert config.display_name(PieceType.ROOK) == "Rook"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path, caplog) -> None:
        config = load_config(tmp_path / "absent.ini")
        assert config == CoreConfig()
        assert "not found" in caplog.text

    def test_reads_ini(self, tmp_path: Path) -> None:
        path = tmp_path / "chessframe.ini"
        path.write_text(
            "[engine]\n"
            "command=stockfish\n"
            "timeout_ms=1500\n"
            "\n"
            "[site]\n"
            "default=Club Server\n"
            "\n"
            "[pieces]\n"
            "names\\king=Roi\n"
            "materials\\white\\king=wk\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.engine_command == "stockfish"
        assert config.engine_default_timeout_ms == 1500
        assert config.default_site == "Club Server"
        assert config.display_name(PieceType.KING) == "Roi"
        assert config.display_name(PieceType.QUEEN) == "Queen"
        assert config.material_for(WHITE_KING) == "wk"
        assert config.piece_for_material("wk") == WHITE_KING
        assert config.material_for(Piece(Color.BLACK, PieceType.KING)) == "black_king"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.ini"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == CoreConfig()
