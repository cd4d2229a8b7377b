"""Tests for Square, Piece and the core enums."""

import pytest

from chessframe.core.enums import CastlingRights, CheckStatus, Color, PieceType
from chessframe.core.errors import InvalidNotationError
from chessframe.core.piece import Piece
from chessframe.core.types import A1, A2, B1, E4, H8, Square, all_squares, parse_square


class TestSquare:
    def test_parse_and_str(self) -> None:
        sq = parse_square("e4")
        assert sq == Square(4, 3)
        assert sq == E4
        assert str(sq) == "e4"

    @pytest.mark.parametrize("name", ["", "e", "i1", "a9", "a0", "e44", "E4"])
    def test_parse_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(InvalidNotationError):
            Square.parse(name)

    def test_value_semantics(self) -> None:
        assert Square(0, 0) == A1
        assert len({Square(0, 0), A1}) == 1

    def test_relative(self) -> None:
        assert A1.relative(1, 1) == Square(1, 1)
        assert not H8.relative(1, 0).in_bounds

    def test_iteration_is_file_major(self) -> None:
        squares = list(all_squares())
        assert len(squares) == 64
        assert squares[:2] == [A1, A2]
        assert squares[8] == B1
        assert squares[-1] == H8


class TestPiece:
    def test_letters(self) -> None:
        assert Piece(Color.WHITE, PieceType.KNIGHT).letter == "N"
        assert Piece(Color.BLACK, PieceType.QUEEN).letter == "q"

    def test_from_letter(self) -> None:
        assert Piece.from_letter("k") == Piece(Color.BLACK, PieceType.KING)
        assert Piece.from_letter("P") == Piece(Color.WHITE, PieceType.PAWN)

    @pytest.mark.parametrize("letter", ["x", "", "1", "Kq"])
    def test_from_letter_rejects(self, letter: str) -> None:
        with pytest.raises(InvalidNotationError):
            Piece.from_letter(letter)


class TestColor:
    def test_opposite(self) -> None:
        assert Color.WHITE.opposite == Color.BLACK
        assert Color.BLACK.opposite == Color.WHITE

    def test_geometry(self) -> None:
        assert Color.WHITE.back_rank == 0
        assert Color.BLACK.back_rank == 7
        assert Color.WHITE.pawn_direction == 1
        assert Color.BLACK.pawn_direction == -1
        assert Color.WHITE.promotion_rank == 7
        assert Color.BLACK.promotion_rank == 0

    def test_letters(self) -> None:
        assert Color.WHITE.letter == "w"
        assert Color.from_letter("b") == Color.BLACK
        assert Color.BLACK.convert_letter("K") == "k"
        assert Color.WHITE.convert_letter("k") == "K"
        with pytest.raises(InvalidNotationError):
            Color.from_letter("x")


class TestEnums:
    def test_piece_type_letters(self) -> None:
        assert [t.letter for t in PieceType] == ["K", "Q", "R", "B", "N", "P"]
        assert PieceType.from_letter("n") == PieceType.KNIGHT

    def test_check_suffix(self) -> None:
        assert CheckStatus.CHECK.suffix == "+"
        assert CheckStatus.from_suffix("#") == CheckStatus.CHECKMATE
        assert CheckStatus.from_suffix("x") is None

    def test_castling_helpers(self) -> None:
        assert CastlingRights.for_side(Color.BLACK, True) == CastlingRights.BLACK_QUEENSIDE
        assert CastlingRights.both(Color.WHITE) == CastlingRights.WHITE_BOTH
        assert CastlingRights.WHITE_BOTH | CastlingRights.BLACK_BOTH == CastlingRights.ALL
