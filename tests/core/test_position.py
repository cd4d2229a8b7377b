"""Tests for Position: board access, the rules oracle and perform()."""

import logging

import pytest

from chessframe.core.enums import CastlingRights, Color, PieceType
from chessframe.core.move import CastleMove, NormalMove, PromotionMove
from chessframe.core.notation import STARTING_FEN, move_from_uci
from chessframe.core.piece import Piece
from chessframe.core.position import Position
from chessframe.core.types import (
    A1, A7, A8, C3, D5, D6, D7, D8, E1, E2, E3, E4, E5, E8, F1, G1, H1,
    Square,
    parse_square,
)

WHITE_PAWN = Piece(Color.WHITE, PieceType.PAWN)
BLACK_PAWN = Piece(Color.BLACK, PieceType.PAWN)
WHITE_KING = Piece(Color.WHITE, PieceType.KING)
WHITE_ROOK = Piece(Color.WHITE, PieceType.ROOK)


def _play(pos: Position, *ucis: str) -> None:
    for uci in ucis:
        pos.perform(move_from_uci(uci, pos))


class TestBoardAccess:
    def test_initial_position(self) -> None:
        pos = Position.initial()
        assert pos.get(E1) == WHITE_KING
        assert pos.get(E4) is None
        assert pos.active_color == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.to_fen() == STARTING_FEN

    def test_set_and_get(self) -> None:
        pos = Position()
        assert pos.set(E4, WHITE_PAWN) is True
        assert pos[E4] == WHITE_PAWN
        pos[E4] = None
        assert pos.get(E4) is None

    def test_out_of_bounds_raises(self) -> None:
        pos = Position()
        with pytest.raises(IndexError, match="File"):
            pos.get(Square(8, 0))
        with pytest.raises(IndexError, match="Rank"):
            pos.get(Square(0, -1))

    def test_move_raw(self) -> None:
        pos = Position.initial()
        assert pos.move_raw(E2, E4) is True
        assert pos.get(E2) is None
        assert pos.get(E4) == WHITE_PAWN
        assert pos.move_raw(E3, E5) is False

    def test_move_raw_drops_destination(self) -> None:
        pos = Position.initial()
        assert pos.move_raw(A1, A7) is True
        assert pos.get(A7) == WHITE_ROOK

    def test_find_is_file_major(self) -> None:
        pos = Position.initial()
        assert pos.find(WHITE_PAWN) == parse_square("a2")
        assert pos.find(Piece(Color.BLACK, PieceType.KING)) == E8
        assert Position().find(WHITE_KING) is None


class TestLines:
    def test_file_open_ignores_endpoints(self) -> None:
        pos = Position.initial()
        assert pos.is_file_open(4, 1, 6) is True
        assert pos.is_file_open(4, 0, 7) is False

    def test_rank_open(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert pos.is_rank_open(0, 4, 7) is True
        assert pos.is_rank_open(0, 0, 7) is False

    def test_diagonal_open(self) -> None:
        pos = Position.initial()
        assert pos.is_diagonal_open(2, 0, 5, 3) is False  # c1-f4 blocked by d2
        assert pos.is_diagonal_open(2, 1, 5, 4) is True  # c2-f5 clear between


class TestMovePossible:
    def test_knight(self) -> None:
        pos = Position.initial()
        assert pos.is_move_possible(parse_square("b1"), C3)
        assert not pos.is_move_possible(parse_square("b1"), parse_square("d2"))

    def test_blocked_slider(self) -> None:
        pos = Position.initial()
        assert not pos.is_move_possible(A1, parse_square("a3"))

    def test_own_piece_on_target(self) -> None:
        pos = Position.initial()
        assert not pos.is_move_possible(E1, E2)

    def test_same_square_and_empty_origin(self) -> None:
        pos = Position.initial()
        assert not pos.is_move_possible(E2, E2)
        assert not pos.is_move_possible(E4, E5)

    def test_queen_moves_like_rook_and_bishop(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1")
        d4 = parse_square("d4")
        assert pos.is_move_possible(d4, parse_square("d8"))
        assert pos.is_move_possible(d4, parse_square("h8"))
        assert not pos.is_move_possible(d4, parse_square("e6"))

    def test_king_single_step(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        assert pos.is_move_possible(E1, parse_square("d2"))
        assert not pos.is_move_possible(E1, E3)

    def test_pawn_pushes(self) -> None:
        pos = Position.initial()
        assert pos.is_move_possible(E2, E3)
        assert pos.is_move_possible(E2, E4)
        assert not pos.is_move_possible(E2, E5)
        assert not pos.is_move_possible(E2, parse_square("e1"))

    def test_pawn_double_step_needs_empty_path(self) -> None:
        pos = Position.initial()
        pos.set(E3, Piece(Color.BLACK, PieceType.KNIGHT))
        assert not pos.is_move_possible(E2, E4)

    def test_pawn_double_step_only_from_start_rank(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1")
        assert not pos.is_move_possible(E3, E5)

    def test_pawn_push_blocked(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/4p3/4P3/8/4K3 w - - 0 1")
        assert not pos.is_move_possible(E3, E4)

    def test_pawn_capture(self) -> None:
        pos = Position.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
        assert pos.is_move_possible(E4, D5)
        assert not pos.is_move_possible(E4, parse_square("f5"))

    def test_pawn_en_passant_target(self) -> None:
        pos = Position.from_fen(
            "rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 3"
        )
        assert pos.is_move_possible(E5, D6)

    def test_black_pawn_direction(self) -> None:
        pos = Position.initial()
        assert pos.is_move_possible(D7, D5)
        assert not pos.is_move_possible(D7, parse_square("d8"))


class TestCheckAndLegality:
    def test_not_in_check_initially(self) -> None:
        pos = Position.initial()
        assert not pos.is_in_check(Color.WHITE)
        assert not pos.is_in_check(Color.BLACK)

    def test_in_check(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/4K2r w - - 0 1")
        assert pos.is_in_check(Color.WHITE)

    def test_missing_king_not_in_check(self) -> None:
        pos = Position.from_fen("8/8/8/8/8/8/8/7r w - - 0 1")
        assert not pos.is_in_check(Color.WHITE)

    def test_pinned_piece_cannot_leave(self) -> None:
        pos = Position.from_fen("4r1k1/8/8/8/8/8/4B3/4K3 w - - 0 1")
        bishop_move = NormalMove(PieceType.BISHOP, E2, parse_square("d3"))
        assert bishop_move.is_possible_on(pos)
        assert not pos.is_legal(bishop_move)

    def test_is_legal_does_not_mutate(self) -> None:
        pos = Position.initial()
        before = pos.copy()
        assert pos.is_legal(NormalMove(PieceType.PAWN, E2, E4))
        assert pos == before


class TestPerform:
    def test_opening_move(self) -> None:
        pos = Position.initial()
        _play(pos, "e2e4")
        assert pos.to_fen() == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_en_passant_only_when_capturable_and_cleared_next_ply(self) -> None:
        pos = Position.initial()
        _play(pos, "e2e4")
        assert pos.en_passant == E3
        _play(pos, "g8f6")
        assert pos.en_passant is None

    def test_en_passant_capture(self) -> None:
        pos = Position.from_fen(
            "rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 3"
        )
        _play(pos, "e5d6")
        assert pos.get(D5) is None
        assert pos.get(D6) == WHITE_PAWN
        assert pos.en_passant is None
        assert pos.halfmove_clock == 0

    def test_short_castle(self) -> None:
        pos = Position.from_fen(
            "rnbqk2r/pppp1ppp/5n2/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"
        )
        move = move_from_uci("e1g1", pos)
        assert move == CastleMove(Color.WHITE, queenside=False)
        pos.perform(move)
        assert pos.get(G1) == WHITE_KING
        assert pos.get(F1) == WHITE_ROOK
        assert pos.get(E1) is None
        assert pos.get(H1) is None
        assert not pos.can_castle(Color.WHITE, False)
        assert not pos.can_castle(Color.WHITE, True)
        assert pos.can_castle(Color.BLACK, False)
        assert pos.active_color == Color.BLACK

    def test_long_castle(self) -> None:
        pos = Position.from_fen("r3k3/8/8/8/8/8/8/4K3 b q - 0 1")
        pos.perform(CastleMove(Color.BLACK, queenside=True))
        assert pos.get(parse_square("c8")) == Piece(Color.BLACK, PieceType.KING)
        assert pos.get(D8) == Piece(Color.BLACK, PieceType.ROOK)
        assert pos.castling == CastlingRights.NONE

    def test_rook_move_clears_one_right(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        _play(pos, "h1h5")
        assert pos.can_castle(Color.WHITE, True)
        assert not pos.can_castle(Color.WHITE, False)

    def test_rights_never_come_back(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        _play(pos, "e1e2", "e8e7", "e2e1")
        assert pos.castling == CastlingRights.NONE

    def test_promotion(self) -> None:
        pos = Position.from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = move_from_uci("a7a8q", pos)
        assert isinstance(move, PromotionMove)
        pos.perform(move)
        assert pos.get(A8) == Piece(Color.WHITE, PieceType.QUEEN)
        assert pos.get(A7) is None
        assert pos.is_in_check(Color.BLACK)

    def test_counters(self) -> None:
        pos = Position.initial()
        _play(pos, "g1f3")
        assert pos.halfmove_clock == 1
        assert pos.fullmove_number == 1
        _play(pos, "b8c6")
        assert pos.halfmove_clock == 2
        assert pos.fullmove_number == 2
        _play(pos, "e2e4")
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 2

    def test_capture_resets_halfmove_clock(self) -> None:
        pos = Position.from_fen("4k3/8/8/3n4/8/2N5/8/4K3 w - - 7 20")
        _play(pos, "c3d5")
        assert pos.halfmove_clock == 0

    def test_illegal_move_is_logged_and_applied(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        pos = Position.initial()
        with caplog.at_level(logging.WARNING, logger="chessframe.core.position"):
            pos.perform(NormalMove(PieceType.ROOK, A1, parse_square("a5")))
        assert "illegal move" in caplog.text
        assert pos.get(parse_square("a5")) == WHITE_ROOK
        assert pos.active_color == Color.BLACK


class TestStateHelpers:
    def test_validate_castling_clears_unmet_rights(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/4K3 w KQkq - 0 1")
        assert pos.castling == CastlingRights.ALL
        pos.validate_castling()
        assert pos.castling == CastlingRights.NONE

    def test_validate_en_passant_requires_pawn_behind(self) -> None:
        pos = Position.from_fen("4k3/8/8/8/8/8/8/4K3 b - e3 0 1")
        pos.validate_en_passant()
        assert pos.en_passant is None

    def test_set_castling(self) -> None:
        pos = Position()
        pos.set_castling(Color.WHITE, False, False)
        assert not pos.can_castle(Color.WHITE, False)
        assert pos.can_castle(Color.WHITE, True)
        pos.set_castling(Color.WHITE, False, True)
        assert pos.can_castle(Color.WHITE, False)

    def test_copy_is_independent(self) -> None:
        pos = Position.initial(site="Club")
        clone = pos.copy()
        clone.set(E4, WHITE_PAWN)
        assert pos.get(E4) is None
        assert clone.site == "Club"

    def test_equality_ignores_site(self) -> None:
        assert Position.initial(site="A") == Position.initial(site="B")
        assert Position.initial() != Position()

    def test_load_fen_replaces_board(self) -> None:
        pos = Position.initial()
        pos.load_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        assert pos.get(parse_square("a2")) is None
        assert len(list(pos.occupied())) == 2

    def test_pretty(self) -> None:
        rows = Position.initial().pretty().splitlines()
        assert rows[0] == "8 r n b q k b n r"
        assert rows[-1] == "  a b c d e f g h"
