"""Tests for the UCI subprocess oracle, run against fake_engine.py."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from chessframe.core.errors import OracleError
from chessframe.core.notation.fen import STARTING_FEN
from chessframe.core.position import Position
from chessframe.engine.uci_engine import EngineOption, UciEngine, _parse_option
from chessframe.game.interfaces import SearchLimit
from chessframe.game.player import EnginePlayer

FAKE_ENGINE = Path(__file__).with_name("fake_engine.py")
TIMEOUT_MS = 5_000


def _engine(mode: str = "normal", timeout_ms: int = TIMEOUT_MS) -> UciEngine:
    return UciEngine([sys.executable, str(FAKE_ENGINE), mode], timeout_ms)


class TestParseOption:
    def test_spin_option(self) -> None:
        option = _parse_option("option name Hash type spin default 16 min 1 max 1024")
        assert option == EngineOption("Hash", "spin", "16")

    def test_name_with_spaces_and_no_default(self) -> None:
        option = _parse_option("option name Clear Hash type button")
        assert option == EngineOption("Clear Hash", "button", None)

    def test_malformed(self) -> None:
        assert _parse_option("option name Hash") is None
        assert _parse_option("option type spin name Hash") is None


class TestHandshake:
    def test_identity_and_options(self) -> None:
        with _engine() as engine:
            assert engine.name == "Fake Engine 1.0"
            assert engine.author == "Test Suite"
            assert set(engine.options) == {"Hash", "Clear Hash", "UCI_LimitStrength"}
            assert engine.options["UCI_LimitStrength"].default == "false"
            assert not engine.closed
        assert engine.closed

    def test_string_command_is_split(self) -> None:
        command = shlex.join([sys.executable, str(FAKE_ENGINE)])
        with UciEngine(command, TIMEOUT_MS) as engine:
            assert engine.name == "Fake Engine 1.0"

    def test_missing_executable(self) -> None:
        with pytest.raises(OracleError, match="Cannot start engine"):
            UciEngine(["/nonexistent/chessframe-engine"])

    def test_handshake_timeout(self) -> None:
        with pytest.raises(OracleError, match="timed out"):
            _engine("mute", timeout_ms=300)


class TestSearch:
    def test_best_move_by_depth(self) -> None:
        with _engine() as engine:
            engine.new_game()
            engine.position_fen(STARTING_FEN)
            assert engine.best_move(SearchLimit.of_depth(3)) == "e2e4"

    def test_best_move_by_time(self) -> None:
        with _engine() as engine:
            engine.position_fen(STARTING_FEN)
            assert engine.best_move(SearchLimit.of_time(50)) == "e2e4"

    def test_best_move_default_limit(self) -> None:
        with _engine() as engine:
            engine.position_fen(STARTING_FEN)
            assert engine.best_move(SearchLimit()) == "e2e4"

    def test_no_move(self) -> None:
        with _engine("nomove") as engine:
            with pytest.raises(OracleError, match="no move"):
                engine.best_move(SearchLimit.of_depth(1))

    def test_search_timeout(self) -> None:
        with _engine("hang", timeout_ms=300) as engine:
            with pytest.raises(OracleError, match="timed out"):
                engine.best_move(SearchLimit.of_depth(1))

    def test_engine_exit(self) -> None:
        with _engine("die") as engine:
            with pytest.raises(OracleError, match="exited"):
                engine.best_move(SearchLimit.of_depth(1))
            # Later commands keep failing instead of hanging.
            with pytest.raises(OracleError):
                engine.new_game()


class TestOptionsAndClose:
    def test_set_option_round_trip(self) -> None:
        with _engine() as engine:
            engine.set_hash(64)
            engine.set_threads(2)
            engine.set_elo(1500)
            engine.set_limit_strength(True)
            engine.set_option("Clear Hash", "")
            assert engine.best_move(SearchLimit.of_depth(1)) == "e2e4"

    def test_close_is_idempotent(self) -> None:
        engine = _engine()
        engine.close()
        engine.close()
        assert engine.closed
        assert "closed" in repr(engine)

    def test_commands_after_close_fail(self) -> None:
        engine = _engine()
        engine.close()
        with pytest.raises(OracleError, match="closed"):
            engine.position_fen(STARTING_FEN)


class TestEnginePlayerWithProcess:
    def test_choose_move(self) -> None:
        player = EnginePlayer(_engine())
        try:
            assert player.name == "Fake Engine 1.0"
            move = player.choose_move(Position.initial()).result(timeout=10)
            assert move.to_uci() == "e2e4"
        finally:
            player.close()
        assert player.oracle.closed
