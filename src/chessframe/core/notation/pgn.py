"""PGN serialization helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from chessframe.core.enums import Color, GameResult

PGN_RESULT_TOKENS = ("*", "1-0", "0-1", "1/2-1/2")
PGN_DATE_FORMAT = "%Y.%m.%d"
PGN_TIME_FORMAT = "%H:%M:%S"


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result == GameResult.WHITE_WINS:
        return "1-0"
    if result == GameResult.BLACK_WINS:
        return "0-1"
    if result == GameResult.DRAW:
        return "1/2-1/2"
    return "*"


def game_result_from_pgn(token: str) -> GameResult:
    """Convert PGN result token to :class:`GameResult`."""
    if token == "1-0":
        return GameResult.WHITE_WINS
    if token == "0-1":
        return GameResult.BLACK_WINS
    if token == "1/2-1/2":
        return GameResult.DRAW
    return GameResult.IN_PROGRESS


def pgn_date(moment: datetime) -> str:
    return moment.strftime(PGN_DATE_FORMAT)


def pgn_time(moment: datetime) -> str:
    return moment.strftime(PGN_TIME_FORMAT)


def pgn_movetext(
    sans: Iterable[str],
    result_token: str = "*",
    *,
    initial_color: Color = Color.WHITE,
    initial_move_number: int = 1,
) -> str:
    """Build PGN movetext, numbering from the game's initial state.

    A game that starts with black to move opens with ``N...``.  The result
    token is only written once the game is decided.
    """
    parts: list[str] = []
    move_number = initial_move_number
    color = initial_color
    if color == Color.BLACK:
        parts.append(f"{move_number}...")
    for san in sans:
        if color == Color.WHITE:
            parts.append(f"{move_number}.")
        parts.append(san)
        if color == Color.BLACK:
            move_number += 1
        color = color.opposite
    if result_token != "*":
        parts.append(result_token)
    return " ".join(parts)


def pgn_tag(key: str, value: object) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'[{key} "{escaped}"]'


def build_pgn(headers: Mapping[str, object], movetext: str) -> str:
    """Build a single-game PGN document: tag pairs, blank line, movetext."""
    lines = [pgn_tag(key, value) for key, value in headers.items()]
    return "\n".join(lines) + "\n\n" + movetext
