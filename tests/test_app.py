"""Tests for the command line entry point."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from chessframe.app import build_parser, main
from chessframe.core.notation.fen import STARTING_FEN

FAKE_ENGINE = Path(__file__).parent / "engine" / "fake_engine.py"


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.fen == STARTING_FEN
        assert args.engine is None
        assert args.depth is None
        assert args.movetime is None
        assert args.max_plies == 400

    def test_depth_and_movetime_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--depth", "3", "--movetime", "100"])


class TestMain:
    def test_no_engine(self) -> None:
        assert main([]) == 2

    def test_plays_and_prints_pgn(self, qapp, capsys) -> None:
        engine = shlex.join([sys.executable, str(FAKE_ENGINE)])
        code = main(["--engine", engine, "--depth", "1", "--max-plies", "1"])
        out = capsys.readouterr().out
        assert code == 0
        assert '[White "Fake Engine 1.0"]' in out
        assert out.rstrip().endswith("1. e2e4")
